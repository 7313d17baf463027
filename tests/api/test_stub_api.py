"""Tests for the stub service endpoints."""

import pytest
from fastapi.testclient import TestClient

from taskflow.api.app import create_app
from taskflow.repositories.memory import InMemoryBackend


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def client(backend):
    """Create test client."""
    return TestClient(create_app(backend))


@pytest.fixture
def auth_headers(backend) -> dict:
    token = backend.register("Ann", "ann@example.com", "pw").token
    return {"Authorization": f"Bearer {token}"}


class TestAuthEndpoints:
    """Tests for /api/auth."""

    def test_register(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Bob", "email": "bob@example.com", "password": "pw"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Bob"
        assert data["email"] == "bob@example.com"
        assert data["token"]

    def test_register_duplicate(self, client, auth_headers):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ann", "email": "ann@example.com", "password": "pw"},
        )

        assert response.status_code == 400
        assert response.text == "Email already registered"

    def test_login_returns_plain_text_token(self, client, auth_headers):
        """Should answer with the bare token, not JSON."""
        response = client.post(
            "/api/auth/login", json={"email": "ann@example.com", "password": "pw"}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert len(response.text) == 32

    def test_login_wrong_password(self, client, auth_headers):
        response = client.post(
            "/api/auth/login", json={"email": "ann@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.text == "Invalid credentials"


class TestTaskEndpoints:
    """Tests for /api/tasks."""

    def test_requires_bearer_token(self, client):
        response = client.get("/api/tasks")

        assert response.status_code == 401

    def test_rejects_unknown_token(self, client):
        response = client.get("/api/tasks", headers={"Authorization": "Bearer bogus"})

        assert response.status_code == 401

    def test_create_and_list(self, client, auth_headers):
        response = client.post(
            "/api/tasks",
            headers=auth_headers,
            json={"title": "Ship it", "priority": "HIGH", "dueDate": "2030-01-31"},
        )

        assert response.status_code == 200
        created = response.json()
        assert created["status"] == "TODO"
        assert created["dueDate"] == "2030-01-31"

        listed = client.get("/api/tasks", headers=auth_headers).json()
        assert listed == [created]

    def test_create_rejects_empty_due_date(self, client, auth_headers):
        """Absent dates must be null, never an empty string."""
        response = client.post(
            "/api/tasks", headers=auth_headers, json={"title": "Ship it", "dueDate": ""}
        )

        assert response.status_code == 422

    def test_create_rejects_blank_title(self, client, auth_headers):
        response = client.post("/api/tasks", headers=auth_headers, json={"title": "  "})

        assert response.status_code == 400

    def test_update_replaces_record(self, client, auth_headers):
        created = client.post(
            "/api/tasks", headers=auth_headers, json={"title": "Draft", "description": "x"}
        ).json()

        response = client.put(
            f"/api/tasks/{created['id']}",
            headers=auth_headers,
            json={"title": "Final", "status": "DONE", "priority": "LOW", "dueDate": None},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "title": "Final",
            "description": None,
            "status": "DONE",
            "priority": "LOW",
            "dueDate": None,
        }

    def test_update_unknown_task(self, client, auth_headers):
        response = client.put("/api/tasks/999", headers=auth_headers, json={"title": "Ghost"})

        assert response.status_code == 404

    def test_delete(self, client, auth_headers):
        created = client.post("/api/tasks", headers=auth_headers, json={"title": "Gone"}).json()

        response = client.delete(f"/api/tasks/{created['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get("/api/tasks", headers=auth_headers).json() == []

    def test_tasks_are_private(self, client, auth_headers):
        client.post("/api/tasks", headers=auth_headers, json={"title": "Mine"})
        other = client.post(
            "/api/auth/register",
            json={"name": "Bob", "email": "bob@example.com", "password": "pw"},
        ).json()["token"]

        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {other}"})

        assert response.json() == []


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Should return healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
