"""Derived views over a cache snapshot: filtering, search and statistics.

Everything here is a pure function of its arguments. Snapshots are never
modified and results keep the snapshot's order.
"""

from datetime import date
from typing import Iterable, Optional

from ..domain.models import Query, StatusFilter, Task, TaskStats, TaskStatus


def matches_status(task: Task, status_filter: StatusFilter) -> bool:
    """Check a task against the status filter."""
    if status_filter == StatusFilter.ALL:
        return True
    if status_filter == StatusFilter.COMPLETED:
        return task.status == TaskStatus.DONE
    return task.status.is_pending


def matches_search(task: Task, search_text: str) -> bool:
    """Case-insensitive containment in title or description."""
    if not search_text:
        return True
    needle = search_text.casefold()
    return needle in task.title.casefold() or needle in (task.description or "").casefold()


def filter_tasks(snapshot: Iterable[Task], query: Query) -> list[Task]:
    """Tasks passing both the status filter and the search text."""
    return [
        task
        for task in snapshot
        if matches_status(task, query.status_filter)
        and matches_search(task, query.search_text)
    ]


def compute_stats(snapshot: Iterable[Task], *, today: Optional[date] = None) -> TaskStats:
    """Aggregate counts for a snapshot.

    Args:
        snapshot: Tasks to count
        today: Evaluation date for overdue checks (defaults to date.today())
    """
    today = today or date.today()
    tasks = list(snapshot)
    return TaskStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == TaskStatus.DONE),
        pending=sum(1 for t in tasks if t.status.is_pending),
        overdue=sum(1 for t in tasks if t.is_overdue(today)),
    )
