"""Protocol definitions for dependency injection."""

from typing import Mapping, Optional, Protocol, Sequence, runtime_checkable

from .models import AuthResult, Task, TaskDraft, TaskId


@runtime_checkable
class KeyValueStorage(Protocol):
    """Durable key-value storage for session slots."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        ...

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write several slots in one step."""
        ...

    def remove(self, *keys: str) -> None:
        """Remove slots; missing keys are ignored."""
        ...


@runtime_checkable
class AuthApi(Protocol):
    """Protocol for the remote authenticator."""

    async def login(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token."""
        ...

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return its token and identity."""
        ...


@runtime_checkable
class TaskApi(Protocol):
    """Protocol for the remote task store, scoped by the session token."""

    async def list_tasks(self) -> Sequence[Task]:
        """List every task of the current session's user."""
        ...

    async def create(self, draft: TaskDraft) -> Optional[Task]:
        """Create a task; return it if the remote echoes it back."""
        ...

    async def update(self, task: Task) -> Optional[Task]:
        """Replace a task with the given full record."""
        ...

    async def delete(self, task_id: TaskId) -> None:
        """Delete a task."""
        ...
