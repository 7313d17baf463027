"""Tests for dependency injection container."""

import pytest

from taskflow.container import Container, Provider, get_container, reset_container
from taskflow.domain.models import TaskDraft
from taskflow.repositories.memory import (
    InMemoryAuthApi,
    InMemoryBackend,
    InMemoryStorage,
    InMemoryTaskApi,
)
from taskflow.services.session_store import SessionStore
from taskflow.services.task_cache import TaskCache


class TestProvider:
    """Tests for Provider class."""

    def test_lazy_initialization(self):
        """Should not call factory until get() is called."""
        call_count = 0

        def factory():
            nonlocal call_count
            call_count += 1
            return InMemoryStorage()

        provider = Provider(factory)
        assert call_count == 0

        provider.get()
        assert call_count == 1

        # Should use cached instance
        provider.get()
        assert call_count == 1

    def test_reset_clears_instance(self):
        """Should clear instance when reset() is called."""
        provider = Provider(InMemoryStorage)

        instance1 = provider.get()
        provider.reset()
        instance2 = provider.get()

        assert instance1 is not instance2

    def test_override(self):
        """Should use overridden instance."""
        provider = Provider(InMemoryStorage)
        override_instance = InMemoryStorage()

        provider.override(override_instance)

        assert provider.get() is override_instance


class TestContainer:
    """Tests for Container class."""

    @pytest.fixture
    def backend(self) -> InMemoryBackend:
        return InMemoryBackend()

    @pytest.fixture
    def container(self, backend) -> Container:
        """Create a fully configured container over one backend."""
        container = Container()
        return (
            container.configure_storage(InMemoryStorage)
            .configure_auth_api(lambda: InMemoryAuthApi(backend))
            .configure_task_api(lambda: InMemoryTaskApi(backend, container.token))
        )

    @pytest.mark.parametrize("attribute", ["storage", "auth_api", "task_api"])
    def test_unconfigured_raises_error(self, attribute):
        """Should raise error when accessing unconfigured components."""
        with pytest.raises(RuntimeError, match="not configured"):
            getattr(Container(), attribute)

    def test_is_configured(self, container):
        assert container.is_configured is True
        assert Container().is_configured is False

    def test_single_session_store_and_cache(self, container):
        """Every consumer shares the same instances."""
        assert isinstance(container.session_store, SessionStore)
        assert isinstance(container.task_cache, TaskCache)
        assert container.session_store is container.session_store
        assert container.task_cache is container.task_cache

    def test_token_follows_session(self, container):
        assert container.token() is None

        container.storage.set_items({"token": "tok"})
        container.session_store.reload()

        assert container.token() == "tok"

    @pytest.mark.asyncio
    async def test_logout_clears_task_cache(self, container):
        store = container.session_store
        await store.register("Ann", "ann@example.com", "pw")
        cache = container.task_cache
        await cache.create(TaskDraft(title="Private"))
        assert len(cache.snapshot()) == 1

        store.logout()

        assert cache.snapshot() == ()

    @pytest.mark.asyncio
    async def test_switching_accounts_clears_task_cache(self, container, backend):
        """Tasks of the previous user never leak into the next session."""
        backend.register("Bob", "bob@example.com", "pw")
        store = container.session_store
        await store.register("Ann", "ann@example.com", "pw")
        cache = container.task_cache
        await cache.create(TaskDraft(title="Ann's secret"))
        seen = []
        store.subscribe(lambda: seen.append(store.is_authenticated()))

        await store.login("bob@example.com", "pw")

        assert seen == [False, True]
        assert cache.snapshot() == ()
        assert await cache.refresh() == ()

    @pytest.mark.asyncio
    async def test_rejected_token_ends_session(self, container, backend):
        store = container.session_store
        await store.register("Ann", "ann@example.com", "pw")
        backend.revoke(store.token)

        await container.task_cache.refresh()

        assert store.is_authenticated() is False
        assert container.storage.get("token") is None

    def test_reset_clears_all(self, container):
        """Should clear all instances on reset."""
        store1 = container.session_store

        container.reset()

        assert container.session_store is not store1

    def test_settings_lazy_load(self, container):
        """Should lazy load settings."""
        settings = container.settings
        assert settings is not None
        # Second access should return same instance
        assert container.settings is settings


class TestGlobalContainer:
    """Tests for global container functions."""

    def setup_method(self):
        """Reset container before each test."""
        reset_container()

    def teardown_method(self):
        reset_container()

    def test_get_container_returns_global(self):
        """Should return global container instance."""
        assert get_container() is get_container()

    def test_reset_container_creates_new(self):
        """Should create new container on reset."""
        c1 = get_container()
        c1.configure_storage(InMemoryStorage)

        reset_container()

        c2 = get_container()
        # New container should be unconfigured
        with pytest.raises(RuntimeError):
            _ = c2.storage
