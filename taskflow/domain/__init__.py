"""Domain models, errors and protocols."""

from .errors import (
    TaskflowError,
    AuthError,
    ValidationError,
    NetworkError,
    SessionExpiredError,
    TaskNotFoundError,
)
from .models import (
    Task,
    TaskId,
    TaskDraft,
    TaskStatus,
    TaskPriority,
    StatusFilter,
    Query,
    TaskStats,
    Identity,
    Session,
    AuthResult,
    CacheSnapshot,
)
from .protocols import (
    KeyValueStorage,
    AuthApi,
    TaskApi,
)

__all__ = [
    "TaskflowError",
    "AuthError",
    "ValidationError",
    "NetworkError",
    "SessionExpiredError",
    "TaskNotFoundError",
    "Task",
    "TaskId",
    "TaskDraft",
    "TaskStatus",
    "TaskPriority",
    "StatusFilter",
    "Query",
    "TaskStats",
    "Identity",
    "Session",
    "AuthResult",
    "CacheSnapshot",
    "KeyValueStorage",
    "AuthApi",
    "TaskApi",
]
