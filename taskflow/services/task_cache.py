"""Session-scoped task cache with optimistic mutations."""

from dataclasses import replace
from typing import Callable, Optional
import logging

from ..domain.errors import (
    NetworkError,
    SessionExpiredError,
    TaskNotFoundError,
    ValidationError,
)
from ..domain.models import CacheSnapshot, Task, TaskDraft, TaskId, TaskStatus
from ..domain.protocols import TaskApi

logger = logging.getLogger(__name__)


class TaskCache:
    """Local view of the current session's tasks.

    The remote service is the system of record. Mutations change the cache
    before the first suspension point and are then sent remotely; a failed
    mutation is never rolled back field by field, the whole cache is
    refetched instead. Mutations of the same task are not serialized.
    """

    def __init__(
        self,
        task_api: TaskApi,
        *,
        on_session_expired: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._api = task_api
        self._on_session_expired = on_session_expired
        self._tasks: CacheSnapshot = ()

    def snapshot(self) -> CacheSnapshot:
        """Current cache contents, without I/O."""
        return self._tasks

    def get(self, task_id: TaskId) -> Optional[Task]:
        """Cached task by id."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def clear(self) -> None:
        """Drop everything cached for the ended session."""
        self._tasks = ()

    async def refresh(self, *, strict: bool = False) -> CacheSnapshot:
        """Replace the cache with the remote task list.

        On failure the previous snapshot stays in place and is returned.

        Args:
            strict: Re-raise the failure after logging it

        Raises:
            NetworkError: only when strict is set
        """
        try:
            tasks = await self._api.list_tasks()
        except NetworkError as e:
            logger.error(f"Failed to fetch tasks: {e}")
            self._handle_expired(e)
            if strict:
                raise
            return self._tasks

        unique: dict[TaskId, Task] = {}
        for task in tasks:
            if task.id in unique:
                logger.warning(f"Ignoring duplicate task id {task.id} from remote")
                continue
            unique[task.id] = task
        self._tasks = tuple(unique.values())
        logger.debug(f"Task cache refreshed: {len(self._tasks)} task(s)")
        return self._tasks

    async def create(self, draft: TaskDraft) -> Optional[Task]:
        """Create a task remotely and pull it in with a refresh.

        No id exists before the remote assigns one, so nothing is added
        locally ahead of the call.

        Returns:
            Created task if the remote echoed it back

        Raises:
            ValidationError: blank title, unreadable due date or remote rejection
            NetworkError: the remote call failed; the cache is untouched
        """
        if not draft.title or not draft.title.strip():
            raise ValidationError("Title is required")
        try:
            due_date = draft.normalized_due_date()
        except ValueError as e:
            raise ValidationError(f"Invalid due date: {draft.due_date!r}") from e

        try:
            created = await self._api.create(replace(draft, due_date=due_date))
        except NetworkError as e:
            logger.error(f"Failed to create task: {e}")
            self._handle_expired(e)
            raise

        await self.refresh()
        return created

    async def set_status(self, task_id: TaskId, status: TaskStatus) -> bool:
        """Set a task's status optimistically.

        Returns:
            True if the remote accepted the change, False if it failed and
            the cache was reconciled from the remote

        Raises:
            TaskNotFoundError: task is not cached
        """
        task = self._require(task_id)
        return await self.update(replace(task, status=status))

    async def toggle(self, task_id: TaskId) -> bool:
        """Flip a task between done and not started."""
        task = self._require(task_id)
        return await self.set_status(task_id, task.status.toggled())

    async def update(self, task: Task) -> bool:
        """Replace a cached task optimistically and send the full record.

        Raises:
            TaskNotFoundError: task is not cached
        """
        self._require(task.id)
        self._tasks = tuple(task if t.id == task.id else t for t in self._tasks)

        try:
            await self._api.update(task)
        except NetworkError as e:
            logger.warning(f"Update of task {task.id} failed, reconciling: {e}")
            self._handle_expired(e)
            await self.refresh()
            return False
        return True

    async def remove(self, task_id: TaskId) -> bool:
        """Remove a task optimistically and delete it remotely.

        Returns:
            True if the remote deleted it, False if it failed and the cache
            was reconciled from the remote

        Raises:
            TaskNotFoundError: task is not cached
        """
        self._require(task_id)
        self._tasks = tuple(t for t in self._tasks if t.id != task_id)

        try:
            await self._api.delete(task_id)
        except NetworkError as e:
            logger.warning(f"Delete of task {task_id} failed, reconciling: {e}")
            self._handle_expired(e)
            await self.refresh()
            return False
        return True

    def _require(self, task_id: TaskId) -> Task:
        task = self.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _handle_expired(self, error: NetworkError) -> None:
        if isinstance(error, SessionExpiredError) and self._on_session_expired:
            self._on_session_expired(str(error))
