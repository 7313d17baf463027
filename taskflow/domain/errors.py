"""Error types raised by the TaskFlow client."""

from typing import Optional


class TaskflowError(Exception):
    """Base class for all client errors."""


class AuthError(TaskflowError):
    """The remote authenticator rejected the credentials or registration."""


class ValidationError(TaskflowError):
    """A task draft was rejected, locally or by the remote service."""


class NetworkError(TaskflowError):
    """Transport failure or remote-side failure on any call."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionExpiredError(NetworkError):
    """The remote no longer accepts the session token."""


class TaskNotFoundError(TaskflowError, LookupError):
    """The task is not present in the local cache."""

    def __init__(self, task_id: object) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
