"""Task routes: bearer-scoped list, create, full replace and delete."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from pydantic import BaseModel

from ...domain.models import Task, TaskDraft, TaskId, TaskPriority, TaskStatus
from ...repositories.memory import InMemoryBackend

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class TaskBody(BaseModel):
    """Task fields sent on create and update."""

    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    # An empty string is rejected, absent dates must be null
    dueDate: Optional[date] = None


class TaskResponse(BaseModel):
    """Task response model."""

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    dueDate: Optional[date] = None


def get_backend(request: Request) -> InMemoryBackend:
    """Get the backend the application was created with."""
    return request.app.state.backend


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def task_to_response(task: Task) -> TaskResponse:
    """Convert Task to TaskResponse."""
    return TaskResponse(
        id=task.id.value,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        dueDate=task.due_date,
    )


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    token: Optional[str] = Depends(bearer_token),
    backend: InMemoryBackend = Depends(get_backend),
) -> list[TaskResponse]:
    """List the caller's tasks."""
    return [task_to_response(t) for t in backend.list_tasks(token)]


@router.post("", response_model=TaskResponse)
async def create_task(
    body: TaskBody,
    token: Optional[str] = Depends(bearer_token),
    backend: InMemoryBackend = Depends(get_backend),
) -> TaskResponse:
    """Create a task for the caller."""
    draft = TaskDraft(
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        due_date=body.dueDate,
    )
    return task_to_response(backend.create_task(token, draft))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskBody,
    token: Optional[str] = Depends(bearer_token),
    backend: InMemoryBackend = Depends(get_backend),
) -> TaskResponse:
    """Replace a task with the full record in the body."""
    task = Task(
        id=TaskId(task_id),
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        due_date=body.dueDate,
    )
    return task_to_response(backend.replace_task(token, task))


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    token: Optional[str] = Depends(bearer_token),
    backend: InMemoryBackend = Depends(get_backend),
) -> Response:
    """Delete a task."""
    backend.delete_task(token, TaskId(task_id))
    return Response(status_code=204)
