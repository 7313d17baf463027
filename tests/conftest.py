"""Shared pytest fixtures."""

import pytest
from datetime import date, timedelta

from taskflow.domain.models import Task, TaskId, TaskStatus, TaskPriority
from taskflow.repositories.memory import (
    InMemoryAuthApi,
    InMemoryBackend,
    InMemoryStorage,
    InMemoryTaskApi,
)
from taskflow.services.session_store import SessionStore

from .fakes import FlakyTaskApi


@pytest.fixture
def sample_task() -> Task:
    """Create a sample task for testing."""
    return Task(
        id=TaskId("1"),
        title="Test task",
        description="Write the quarterly report",
        status=TaskStatus.NOT_STARTED,
        priority=TaskPriority.MEDIUM,
    )


@pytest.fixture
def sample_task_with_due_date() -> Task:
    """Create a sample task due yesterday."""
    return Task(
        id=TaskId("2"),
        title="Task with due date",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        due_date=date.today() - timedelta(days=1),
    )


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def auth_api(backend) -> InMemoryAuthApi:
    return InMemoryAuthApi(backend)


@pytest.fixture
def store(storage, auth_api) -> SessionStore:
    return SessionStore(storage, auth_api)


@pytest.fixture
def token(backend) -> str:
    """Token of a registered account on the in-memory backend."""
    return backend.register("Alice", "alice@example.com", "s3cret").token


@pytest.fixture
def task_api(backend, token) -> InMemoryTaskApi:
    return InMemoryTaskApi(backend, lambda: token)


@pytest.fixture
def flaky_api(task_api) -> FlakyTaskApi:
    return FlakyTaskApi(task_api)
