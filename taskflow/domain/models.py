"""Domain models for the TaskFlow client."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union


class TaskStatus(Enum):
    """Task status values (wire values as the remote service spells them)."""

    NOT_STARTED = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def is_pending(self) -> bool:
        return self in (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS)

    def toggled(self) -> "TaskStatus":
        """Binary done/not-done toggle.

        DONE always goes back to NOT_STARTED, whatever the task was before.
        """
        if self == TaskStatus.DONE:
            return TaskStatus.NOT_STARTED
        return TaskStatus.DONE


class TaskPriority(Enum):
    """Task priority levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class StatusFilter(Enum):
    """Status filter offered by list views."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TaskId:
    """Value object for task identification."""

    value: str

    @classmethod
    def from_wire(cls, raw: Union[str, int]) -> "TaskId":
        """Create a TaskId from the identifier the remote assigned."""
        return cls(str(raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Task:
    """Cached task entity. The remote service is the system of record."""

    id: TaskId
    title: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    due_date: Optional[date] = None

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """Check if task is overdue.

        A task is overdue once its due date has fully elapsed, so a task
        due today is not overdue yet.
        """
        if not self.due_date:
            return False
        if self.status == TaskStatus.DONE:
            return False
        return self.due_date < (today or date.today())

    def is_due_today(self, today: Optional[date] = None) -> bool:
        """Check if task is due today."""
        if not self.due_date:
            return False
        return self.due_date == (today or date.today())


@dataclass(frozen=True)
class TaskDraft:
    """Fields for a task that does not exist remotely yet."""

    title: str
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.NOT_STARTED
    # date, "YYYY-MM-DD" or "" (no due date)
    due_date: Union[date, str, None] = None

    def normalized_due_date(self) -> Optional[date]:
        """Return the due date as a date, mapping an empty value to None."""
        if not self.due_date:
            return None
        if isinstance(self.due_date, date):
            return self.due_date
        return date.fromisoformat(self.due_date.strip())


@dataclass(frozen=True)
class Identity:
    """User identity snapshot kept alongside the token."""

    email: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name to greet the user with, falling back to the email local-part."""
        if self.name:
            return self.name
        local_part = self.email.split("@")[0] if self.email else ""
        return local_part or "User"

    def to_dict(self) -> dict:
        data = {"email": self.email}
        if self.name:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Identity":
        return cls(email=data.get("email") or "", name=data.get("name") or None)


@dataclass(frozen=True)
class Session:
    """An authenticated session: bearer token plus identity."""

    token: str
    identity: Identity


@dataclass(frozen=True)
class AuthResult:
    """What the remote authenticator hands back on registration."""

    token: str
    email: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Query:
    """Search text and status filter for a task list view."""

    search_text: str = ""
    status_filter: StatusFilter = StatusFilter.ALL


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counts over a cache snapshot."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0


# Ordered, immutable view of the cache
CacheSnapshot = tuple[Task, ...]
