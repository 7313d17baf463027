"""Test doubles for the remote task store."""

import asyncio
from typing import Optional, Sequence

from taskflow.domain.errors import NetworkError
from taskflow.domain.models import Task, TaskDraft, TaskId
from taskflow.domain.protocols import TaskApi


class FlakyTaskApi:
    """TaskApi wrapper that records calls and fails them on demand.

    - fail_* flags make the matching call raise NetworkError
    - gate, when set, holds update/delete at their suspension point until
      the event is set, so tests can observe the optimistic state
    - delete_applies_before_failing simulates a delete that took effect
      remotely although the response was lost
    """

    def __init__(self, inner: TaskApi) -> None:
        self.inner = inner
        self.fail_lists = False
        self.fail_creates = False
        self.fail_updates = False
        self.fail_deletes = False
        self.delete_applies_before_failing = False
        self.gate: Optional[asyncio.Event] = None
        self.calls: list[tuple[str, object]] = []

    async def _pause(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def list_tasks(self) -> Sequence[Task]:
        self.calls.append(("list", None))
        if self.fail_lists:
            raise NetworkError("fetch failed", status_code=503)
        return await self.inner.list_tasks()

    async def create(self, draft: TaskDraft) -> Optional[Task]:
        self.calls.append(("create", draft))
        if self.fail_creates:
            raise NetworkError("create failed", status_code=500)
        return await self.inner.create(draft)

    async def update(self, task: Task) -> Optional[Task]:
        self.calls.append(("update", task))
        await self._pause()
        if self.fail_updates:
            raise NetworkError("update failed", status_code=500)
        return await self.inner.update(task)

    async def delete(self, task_id: TaskId) -> None:
        self.calls.append(("delete", task_id))
        await self._pause()
        if self.fail_deletes:
            if self.delete_applies_before_failing:
                await self.inner.delete(task_id)
            raise NetworkError("delete failed", status_code=502)
        await self.inner.delete(task_id)

    def calls_named(self, name: str) -> list[object]:
        return [arg for call, arg in self.calls if call == name]
