"""Dependency injection container."""

from dataclasses import dataclass
from typing import TypeVar, Generic, Callable, Optional, Any

from taskflow.domain.protocols import AuthApi, KeyValueStorage, TaskApi
from taskflow.services.session_store import SessionStore
from taskflow.services.task_cache import TaskCache


T = TypeVar("T")


class Provider(Generic[T]):
    """Lazy provider that creates instance on first access."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._instance: Optional[T] = None

    def get(self) -> T:
        """Get the instance, creating it if necessary."""
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def reset(self) -> None:
        """Reset the instance (for testing)."""
        self._instance = None

    def override(self, instance: T) -> None:
        """Override with a specific instance (for testing)."""
        self._instance = instance


@dataclass
class Container:
    """Dependency injection container.

    Holds exactly one SessionStore and one TaskCache; every consumer gets
    the same instances by reference.
    """

    _storage: Optional[Provider[KeyValueStorage]] = None
    _auth_api: Optional[Provider[AuthApi]] = None
    _task_api: Optional[Provider[TaskApi]] = None

    _session_store: Optional[SessionStore] = None
    _task_cache: Optional[TaskCache] = None

    # Settings cache
    _settings: Optional[Any] = None

    @property
    def is_configured(self) -> bool:
        return None not in (self._storage, self._auth_api, self._task_api)

    @property
    def storage(self) -> KeyValueStorage:
        """Get the session storage."""
        if self._storage is None:
            raise RuntimeError("Storage not configured")
        return self._storage.get()

    @property
    def auth_api(self) -> AuthApi:
        """Get the remote authenticator."""
        if self._auth_api is None:
            raise RuntimeError("Auth API not configured")
        return self._auth_api.get()

    @property
    def task_api(self) -> TaskApi:
        """Get the remote task store."""
        if self._task_api is None:
            raise RuntimeError("Task API not configured")
        return self._task_api.get()

    @property
    def session_store(self) -> SessionStore:
        """Get the process-wide SessionStore."""
        if self._session_store is None:
            self._session_store = SessionStore(self.storage, self.auth_api)
        return self._session_store

    @property
    def task_cache(self) -> TaskCache:
        """Get the process-wide TaskCache, cleared whenever the session ends."""
        if self._task_cache is None:
            store = self.session_store
            cache = TaskCache(self.task_api, on_session_expired=store.invalidate)

            def clear_when_anonymous() -> None:
                if not store.is_authenticated():
                    cache.clear()

            store.subscribe(clear_when_anonymous)
            self._task_cache = cache
        return self._task_cache

    @property
    def settings(self) -> Any:
        """Get application settings."""
        if self._settings is None:
            from taskflow.config.settings import get_settings

            self._settings = get_settings()
        return self._settings

    def token(self) -> Optional[str]:
        """Token provider handed to task APIs."""
        return self.session_store.token

    def configure_storage(self, factory: Callable[[], KeyValueStorage]) -> "Container":
        """Configure the session storage."""
        self._storage = Provider(factory)
        return self

    def configure_auth_api(self, factory: Callable[[], AuthApi]) -> "Container":
        """Configure the remote authenticator."""
        self._auth_api = Provider(factory)
        return self

    def configure_task_api(self, factory: Callable[[], TaskApi]) -> "Container":
        """Configure the remote task store."""
        self._task_api = Provider(factory)
        return self

    def reset(self) -> None:
        """Reset all providers (for testing)."""
        for provider in (self._storage, self._auth_api, self._task_api):
            if provider:
                provider.reset()
        self._session_store = None
        self._task_cache = None
        self._settings = None


# Global container instance
container = Container()


def get_container() -> Container:
    """Get the global container instance."""
    return container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global container
    container.reset()
    container = Container()
