"""HTTP client for the TaskFlow service."""

from datetime import date, datetime
from typing import Callable, Optional, Sequence
import logging

import httpx

from ..domain.errors import (
    AuthError,
    NetworkError,
    SessionExpiredError,
    ValidationError,
)
from ..domain.models import (
    AuthResult,
    Task,
    TaskDraft,
    TaskId,
    TaskPriority,
    TaskStatus,
)

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Invalid email or password"
REGISTER_FAILED_MESSAGE = "Registration failed. Please try again."
CREATE_FAILED_MESSAGE = "Failed to create task"

# InvalidURL is not an HTTPError
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def task_to_payload(task: Task) -> dict:
    """Convert Task to the full-record JSON body the service expects.

    The id travels in the URL, everything else is always sent because
    updates replace the whole record.
    """
    return {
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
    }


def draft_to_payload(draft: TaskDraft) -> dict:
    """Convert TaskDraft to a creation body; the service rejects empty dates."""
    due_date = draft.normalized_due_date()
    return {
        "title": draft.title,
        "description": draft.description,
        "status": draft.status.value,
        "priority": draft.priority.value,
        "dueDate": due_date.isoformat() if due_date else None,
    }


def payload_to_task(data: dict) -> Optional[Task]:
    """Convert a task JSON object to Task.

    Returns:
        Task object or None if conversion fails
    """
    try:
        title = data["title"]
        if not isinstance(title, str):
            return None

        try:
            status = TaskStatus(data.get("status") or TaskStatus.NOT_STARTED.value)
        except ValueError:
            status = TaskStatus.NOT_STARTED

        try:
            priority = TaskPriority(data.get("priority") or TaskPriority.MEDIUM.value)
        except ValueError:
            priority = TaskPriority.MEDIUM

        description = data.get("description")
        if not isinstance(description, str):
            description = None

        due_date = None
        due_str = data.get("dueDate")
        if due_str:
            # Handle both date and datetime formats
            if "T" in due_str:
                due_date = datetime.fromisoformat(due_str.replace("Z", "+00:00")).date()
            else:
                due_date = date.fromisoformat(due_str)

        return Task(
            id=TaskId.from_wire(data["id"]),
            title=title,
            description=description or None,
            status=status,
            priority=priority,
            due_date=due_date,
        )

    except (KeyError, TypeError, ValueError):
        return None


def _rejection_message(response: httpx.Response) -> Optional[str]:
    """Human-readable reason the service gave, if it gave one."""
    text = response.text.strip()
    if not text:
        return None
    if "json" in response.headers.get("content-type", ""):
        try:
            data = response.json()
        except ValueError:
            return text
        if isinstance(data, str) and data.strip():
            return data.strip()
        return None
    return text


class _HttpService:
    """Shared client handling for the TaskFlow endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the service client.

        Args:
            base_url: Root URL of the TaskFlow service
            timeout: Per-request timeout in seconds
            http_client: Optional HTTP client for testing
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_headers(self) -> dict:
        """Get API request headers."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._http_client:
            return self._http_client
        return httpx.AsyncClient()

    async def _release(self, client: httpx.AsyncClient) -> None:
        if self._owns_client:
            await client.aclose()


class HttpAuthApi(_HttpService):
    """Remote authenticator: /api/auth/login and /api/auth/register."""

    async def login(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token.

        The service answers with the raw token string, not a JSON object.

        Raises:
            AuthError: credentials rejected
            NetworkError: service unreachable
        """
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self._base_url}/api/auth/login",
                headers=self._get_headers(),
                json={"email": email, "password": password},
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Could not reach the authentication service: {e}") from e
        finally:
            await self._release(client)

        if response.status_code >= 400:
            raise AuthError(_rejection_message(response) or LOGIN_FAILED_MESSAGE)

        token = self._token_from(response)
        if not token:
            raise AuthError(LOGIN_FAILED_MESSAGE)
        return token

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account; token and identity come back in one response.

        Raises:
            AuthError: registration rejected
            NetworkError: service unreachable or answered nonsense
        """
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self._base_url}/api/auth/register",
                headers=self._get_headers(),
                json={"name": name, "email": email, "password": password},
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Could not reach the authentication service: {e}") from e
        finally:
            await self._release(client)

        if response.status_code >= 400:
            raise AuthError(_rejection_message(response) or REGISTER_FAILED_MESSAGE)

        try:
            data = response.json()
            token = data["token"]
        except (ValueError, KeyError, TypeError) as e:
            raise NetworkError("Unexpected registration response", response.status_code) from e
        if not isinstance(token, str) or not token:
            raise AuthError(REGISTER_FAILED_MESSAGE)

        return AuthResult(
            token=token,
            email=data.get("email") or email,
            name=data.get("name") or name or None,
        )

    @staticmethod
    def _token_from(response: httpx.Response) -> Optional[str]:
        if "json" in response.headers.get("content-type", ""):
            try:
                data = response.json()
            except ValueError:
                return None
            return data.strip() if isinstance(data, str) else None
        return response.text.strip() or None


class HttpTaskApi(_HttpService):
    """Remote task store under /api/tasks, scoped by the bearer token."""

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], Optional[str]],
        *,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, http_client=http_client)
        self._token_provider = token_provider

    def _get_headers(self) -> dict:
        headers = super()._get_headers()
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def list_tasks(self) -> Sequence[Task]:
        """List every task of the token's owner.

        Raises:
            SessionExpiredError: token rejected
            NetworkError: any other failure
        """
        client = await self._get_client()
        try:
            response = await client.get(
                f"{self._base_url}/api/tasks",
                headers=self._get_headers(),
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Failed to fetch tasks: {e}") from e
        finally:
            await self._release(client)

        self._check(response, "fetch tasks")
        try:
            items = response.json()
        except ValueError as e:
            raise NetworkError("Task list is not valid JSON", response.status_code) from e
        if not isinstance(items, list):
            raise NetworkError("Task list is not a JSON array", response.status_code)

        tasks = []
        for item in items:
            task = payload_to_task(item) if isinstance(item, dict) else None
            if task is None:
                logger.warning(f"Skipping malformed task payload: {item!r}")
                continue
            tasks.append(task)
        return tasks

    async def create(self, draft: TaskDraft) -> Optional[Task]:
        """Create a task.

        Returns:
            Created task if the service echoed it back, None otherwise

        Raises:
            ValidationError: draft rejected by the service
            NetworkError: any other failure
        """
        payload = draft_to_payload(draft)

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self._base_url}/api/tasks",
                headers=self._get_headers(),
                json=payload,
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"{CREATE_FAILED_MESSAGE}: {e}") from e
        finally:
            await self._release(client)

        if response.status_code in (400, 422):
            raise ValidationError(_rejection_message(response) or CREATE_FAILED_MESSAGE)
        self._check(response, "create task")
        return self._task_from(response)

    async def update(self, task: Task) -> Optional[Task]:
        """Replace a task with the given full record.

        Raises:
            SessionExpiredError: token rejected
            NetworkError: any other failure
        """
        client = await self._get_client()
        try:
            response = await client.put(
                f"{self._base_url}/api/tasks/{task.id.value}",
                headers=self._get_headers(),
                json=task_to_payload(task),
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Failed to update task {task.id}: {e}") from e
        finally:
            await self._release(client)

        self._check(response, f"update task {task.id}")
        return self._task_from(response)

    async def delete(self, task_id: TaskId) -> None:
        """Delete a task.

        Raises:
            SessionExpiredError: token rejected
            NetworkError: any other failure
        """
        client = await self._get_client()
        try:
            response = await client.delete(
                f"{self._base_url}/api/tasks/{task_id.value}",
                headers=self._get_headers(),
                timeout=self._timeout,
            )
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Failed to delete task {task_id}: {e}") from e
        finally:
            await self._release(client)

        self._check(response, f"delete task {task_id}")

    @staticmethod
    def _check(response: httpx.Response, action: str) -> None:
        if response.status_code in (401, 403):
            raise SessionExpiredError(
                f"Session rejected while trying to {action}",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            reason = _rejection_message(response)
            message = f"Failed to {action}: HTTP {response.status_code}"
            if reason:
                message = f"{message} ({reason})"
            raise NetworkError(message, status_code=response.status_code)

    @staticmethod
    def _task_from(response: httpx.Response) -> Optional[Task]:
        if not response.content:
            return None
        try:
            data = response.json()
        except ValueError:
            return None
        return payload_to_task(data) if isinstance(data, dict) else None
