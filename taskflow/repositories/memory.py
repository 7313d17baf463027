"""In-memory implementations of storage and the remote service."""

from dataclasses import dataclass
from itertools import count
from typing import Callable, Mapping, Optional, Sequence
import uuid

from ..domain.errors import (
    AuthError,
    NetworkError,
    SessionExpiredError,
    TaskNotFoundError,
    ValidationError,
)
from ..domain.models import AuthResult, Task, TaskDraft, TaskId


class InMemoryStorage:
    """In-memory KeyValueStorage, shared by reference to simulate restarts."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        return self._data.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write several slots in one step."""
        self._data.update(items)

    def remove(self, *keys: str) -> None:
        """Remove slots; missing keys are ignored."""
        for key in keys:
            self._data.pop(key, None)


@dataclass
class _Account:
    name: str
    email: str
    password: str


class InMemoryBackend:
    """Process-local stand-in for the TaskFlow service.

    Tasks are scoped by the owner derived from the bearer token, updates
    are full replacements and the last write wins.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}
        self._tokens: dict[str, str] = {}
        self._tasks: dict[str, dict[str, Task]] = {}
        self._ids = count(1)

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and issue a token for it."""
        if not name.strip() or not email.strip() or not password:
            raise AuthError("Name, email and password are required")
        if email in self._accounts:
            raise AuthError("Email already registered")
        self._accounts[email] = _Account(name=name, email=email, password=password)
        return AuthResult(token=self._issue_token(email), email=email, name=name)

    def login(self, email: str, password: str) -> str:
        """Check credentials and issue a token."""
        account = self._accounts.get(email)
        if account is None or account.password != password:
            raise AuthError("Invalid credentials")
        return self._issue_token(email)

    def revoke(self, token: str) -> None:
        """Forget a token, as if it expired remotely."""
        self._tokens.pop(token, None)

    def owner_of(self, token: Optional[str]) -> str:
        """Return the account email the token belongs to."""
        if not token or token not in self._tokens:
            raise SessionExpiredError("Invalid or missing token", status_code=401)
        return self._tokens[token]

    def list_tasks(self, token: Optional[str]) -> list[Task]:
        """All tasks of the token's owner, in creation order."""
        return list(self._tasks_of(token).values())

    def create_task(self, token: Optional[str], draft: TaskDraft) -> Task:
        """Create a task and assign it an id."""
        tasks = self._tasks_of(token)
        if not draft.title or not draft.title.strip():
            raise ValidationError("Title is required")
        task = Task(
            id=TaskId.from_wire(next(self._ids)),
            title=draft.title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            due_date=draft.normalized_due_date(),
        )
        tasks[task.id.value] = task
        return task

    def replace_task(self, token: Optional[str], task: Task) -> Task:
        """Replace a stored task with the given full record."""
        tasks = self._tasks_of(token)
        if task.id.value not in tasks:
            raise TaskNotFoundError(task.id)
        if not task.title or not task.title.strip():
            raise ValidationError("Title is required")
        tasks[task.id.value] = task
        return task

    def delete_task(self, token: Optional[str], task_id: TaskId) -> None:
        """Delete a stored task."""
        tasks = self._tasks_of(token)
        if task_id.value not in tasks:
            raise TaskNotFoundError(task_id)
        del tasks[task_id.value]

    def _issue_token(self, email: str) -> str:
        token = uuid.uuid4().hex
        self._tokens[token] = email
        return token

    def _tasks_of(self, token: Optional[str]) -> dict[str, Task]:
        return self._tasks.setdefault(self.owner_of(token), {})


class InMemoryAuthApi:
    """AuthApi over an InMemoryBackend."""

    def __init__(self, backend: InMemoryBackend) -> None:
        self._backend = backend

    async def login(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token."""
        return self._backend.login(email, password)

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return its token and identity."""
        return self._backend.register(name, email, password)


class InMemoryTaskApi:
    """TaskApi over an InMemoryBackend, authenticated by a token provider."""

    def __init__(
        self,
        backend: InMemoryBackend,
        token_provider: Callable[[], Optional[str]],
    ) -> None:
        self._backend = backend
        self._token_provider = token_provider

    async def list_tasks(self) -> Sequence[Task]:
        """List every task of the current session's user."""
        return self._backend.list_tasks(self._token_provider())

    async def create(self, draft: TaskDraft) -> Optional[Task]:
        """Create a task."""
        return self._backend.create_task(self._token_provider(), draft)

    async def update(self, task: Task) -> Optional[Task]:
        """Replace a task with the given full record."""
        try:
            return self._backend.replace_task(self._token_provider(), task)
        except TaskNotFoundError as e:
            raise NetworkError(str(e), status_code=404) from e

    async def delete(self, task_id: TaskId) -> None:
        """Delete a task."""
        try:
            self._backend.delete_task(self._token_provider(), task_id)
        except TaskNotFoundError as e:
            raise NetworkError(str(e), status_code=404) from e
