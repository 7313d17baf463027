"""CLI commands for the TaskFlow client."""

import asyncio
import json
import logging
from typing import NoReturn, Optional

import click

from ..container import get_container
from ..domain.errors import NetworkError, SessionExpiredError, TaskflowError
from ..domain.models import (
    Query,
    StatusFilter,
    Task,
    TaskDraft,
    TaskId,
    TaskPriority,
    TaskStatus,
)
from ..repositories.http import task_to_payload
from ..services.session_gate import DASHBOARD, SessionGate
from ..services.views import compute_stats, filter_tasks

STATUS_NAMES = {
    "todo": TaskStatus.NOT_STARTED,
    "in_progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
}

STATUS_ICONS = {
    TaskStatus.NOT_STARTED: "📋",
    TaskStatus.IN_PROGRESS: "🔄",
    TaskStatus.DONE: "✅",
}

PRIORITY_ICONS = {
    TaskPriority.LOW: "🟢",
    TaskPriority.MEDIUM: "🔵",
    TaskPriority.HIGH: "🟠",
    TaskPriority.URGENT: "🔴",
}


def setup_container():
    """Set up container with default configuration."""
    from ..config.settings import get_settings
    from ..repositories.http import HttpAuthApi, HttpTaskApi
    from ..repositories.json_file import JsonFileStorage
    from ..repositories.memory import InMemoryStorage

    container = get_container()

    # Check if already configured
    if container.is_configured:
        return

    settings = get_settings()
    api_settings = settings.api
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        container.configure_storage(InMemoryStorage)
    else:
        container.configure_storage(
            lambda: JsonFileStorage(storage_settings.resolved_path)
        )

    container.configure_auth_api(
        lambda: HttpAuthApi(api_settings.base_url, timeout=api_settings.timeout)
    )
    container.configure_task_api(
        lambda: HttpTaskApi(
            api_settings.base_url,
            container.token,
            timeout=api_settings.timeout,
        )
    )


def setup_logging(verbose: bool) -> None:
    """Configure the root logger once for the CLI process."""
    from ..config.settings import get_settings

    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run_async(coro):
    """Run async coroutine in sync context."""
    return asyncio.run(coro)


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise click.exceptions.Exit(1)


def require_session() -> None:
    """Exit unless the dashboard is reachable with the stored session."""
    gate = SessionGate(get_container().session_store)
    try:
        if gate.resolve(DASHBOARD) != DASHBOARD:
            fail("Not logged in. Run 'taskflow login' first.")
    finally:
        gate.close()


def format_task(task: Task) -> str:
    """One-line rendering of a task."""
    status_icon = STATUS_ICONS.get(task.status, "❓")
    priority_icon = PRIORITY_ICONS.get(task.priority, "⚪")

    due_str = ""
    if task.due_date:
        due_str = f" 📅 {task.due_date.strftime('%b %d, %Y')}"
        if task.is_overdue():
            due_str += " (overdue)"

    return f"{status_icon} {priority_icon} [{task.id.value}] {task.title}{due_str}"


def task_to_json(task: Task) -> dict:
    return {"id": task.id.value, **task_to_payload(task)}


def report_network_error(error: NetworkError) -> NoReturn:
    if isinstance(error, SessionExpiredError):
        fail("Session expired. Run 'taskflow login' again.")
    fail(str(error))


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Command-line client for the TaskFlow task tracker."""
    setup_logging(verbose)
    setup_container()


@cli.command("login")
@click.option("--email", "-e", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
def login(email: str, password: str):
    """Log in and remember the session."""
    store = get_container().session_store

    try:
        session = run_async(store.login(email, password))
    except TaskflowError as e:
        fail(str(e))

    click.echo(f"✅ Logged in as {session.identity.display_name}")


@cli.command("register")
@click.option("--name", "-n", prompt=True, help="Display name")
@click.option("--email", "-e", prompt=True, help="Account email")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Account password",
)
def register(name: str, email: str, password: str):
    """Create an account and log in with it."""
    store = get_container().session_store

    try:
        session = run_async(store.register(name, email, password))
    except TaskflowError as e:
        fail(str(e))

    click.echo(f"✅ Welcome, {session.identity.display_name}")


@cli.command("logout")
def logout():
    """Forget the stored session."""
    get_container().session_store.logout()
    click.echo("Logged out.")


@cli.command("whoami")
def whoami():
    """Show the logged-in user."""
    identity = get_container().session_store.identity
    if identity is None:
        fail("Not logged in.")

    click.echo(f"User: {identity.display_name}")
    if identity.email:
        click.echo(f"Email: {identity.email}")


@cli.command("list")
@click.option("--search", "-q", default="", help="Text to look for in title or description")
@click.option(
    "--status",
    "-s",
    type=click.Choice([f.value for f in StatusFilter]),
    default=StatusFilter.ALL.value,
    help="Which tasks to show",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def list_tasks(search: str, status: str, output_json: bool):
    """List tasks with optional search and status filter."""
    require_session()
    cache = get_container().task_cache

    try:
        snapshot = run_async(cache.refresh(strict=True))
    except NetworkError as e:
        report_network_error(e)

    tasks = filter_tasks(snapshot, Query(search_text=search, status_filter=StatusFilter(status)))

    if output_json:
        output = {
            "tasks": [task_to_json(t) for t in tasks],
            "total": len(tasks),
        }
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo(f"Your tasks ({len(tasks)}):\n")
    for task in tasks:
        click.echo(format_task(task))


@cli.command("stats")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def stats(output_json: bool):
    """Show task counts."""
    require_session()
    cache = get_container().task_cache

    try:
        snapshot = run_async(cache.refresh(strict=True))
    except NetworkError as e:
        report_network_error(e)

    result = compute_stats(snapshot)

    if output_json:
        click.echo(json.dumps(
            {
                "total": result.total,
                "completed": result.completed,
                "pending": result.pending,
                "overdue": result.overdue,
            },
            indent=2,
        ))
        return

    click.echo("📊 Task Summary\n")
    click.echo(f"Total: {result.total}")
    click.echo(f"Done: {result.completed}")
    click.echo(f"Pending: {result.pending}")
    click.echo(f"Overdue: {result.overdue}")


@cli.command("add")
@click.argument("title")
@click.option("--description", "-d", default=None, help="Task description")
@click.option(
    "--priority",
    "-p",
    type=click.Choice([p.name for p in TaskPriority], case_sensitive=False),
    default=TaskPriority.MEDIUM.name,
    help="Task priority",
)
@click.option(
    "--status",
    "-s",
    type=click.Choice(list(STATUS_NAMES)),
    default="todo",
    help="Initial status",
)
@click.option("--due", default="", help="Due date (YYYY-MM-DD)")
def add_task(title: str, description: Optional[str], priority: str, status: str, due: str):
    """Create a task."""
    require_session()
    cache = get_container().task_cache

    draft = TaskDraft(
        title=title,
        description=description,
        priority=TaskPriority[priority.upper()],
        status=STATUS_NAMES[status],
        due_date=due,
    )

    try:
        created = run_async(cache.create(draft))
    except SessionExpiredError as e:
        report_network_error(e)
    except TaskflowError as e:
        fail(str(e))

    if created:
        click.echo(f"✅ Task created: [{created.id.value}] {created.title}")
    else:
        click.echo(f"✅ Task created: {title}")


async def _refresh_then(cache, mutation):
    await cache.refresh(strict=True)
    return await mutation()


def run_mutation(task_id: str, mutate) -> None:
    """Refresh the cache, apply a mutation and report its outcome."""
    cache = get_container().task_cache
    key = TaskId(task_id)

    try:
        accepted = run_async(_refresh_then(cache, lambda: mutate(cache, key)))
    except NetworkError as e:
        report_network_error(e)
    except LookupError:
        fail(f"Task not found: {task_id}")

    if not accepted:
        fail("The server rejected the change; task list reloaded.")


@cli.command("toggle")
@click.argument("task_id")
def toggle_task(task_id: str):
    """Flip a task between done and not started."""
    require_session()
    run_mutation(task_id, lambda cache, key: cache.toggle(key))

    task = get_container().task_cache.get(TaskId(task_id))
    if task:
        click.echo(f"{STATUS_ICONS[task.status]} {task.title}: {task.status.name}")


@cli.command("status")
@click.argument("task_id")
@click.argument("status", type=click.Choice(list(STATUS_NAMES)))
def set_status(task_id: str, status: str):
    """Set a task's status."""
    require_session()
    run_mutation(task_id, lambda cache, key: cache.set_status(key, STATUS_NAMES[status]))
    click.echo(f"{STATUS_ICONS[STATUS_NAMES[status]]} Task {task_id}: {status}")


@cli.command("delete")
@click.argument("task_id")
@click.confirmation_option(prompt="Are you sure you want to delete this task?")
def delete_task(task_id: str):
    """Delete a task."""
    require_session()
    run_mutation(task_id, lambda cache, key: cache.remove(key))
    click.echo(f"🗑️ Task deleted: {task_id}")


@cli.command("serve-stub")
@click.option("--host", "-h", default=None, help="Host to bind to")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to")
def serve_stub(host: Optional[str], port: Optional[int]):
    """Start an in-memory stub of the TaskFlow service."""
    import uvicorn
    from ..config.settings import get_settings

    stub_settings = get_settings().stub_server
    host = host or stub_settings.host
    port = port or stub_settings.port

    click.echo(f"Starting stub server at http://{host}:{port}")
    click.echo("Press Ctrl+C to stop")

    uvicorn.run("taskflow.api.app:app", host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
