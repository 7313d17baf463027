"""Service layer implementations."""

from .session_store import SessionStore
from .session_gate import SessionGate
from .task_cache import TaskCache
from .views import filter_tasks, compute_stats

__all__ = [
    "SessionStore",
    "SessionGate",
    "TaskCache",
    "filter_tasks",
    "compute_stats",
]
