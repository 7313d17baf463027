"""Decides which screens a navigation may show."""

from typing import Callable, Optional
import logging

from .session_store import SessionStore

logger = logging.getLogger(__name__)

LOGIN = "/login"
REGISTER = "/register"
DASHBOARD = "/dashboard"

_PUBLIC_SCREENS = (LOGIN, REGISTER)


class SessionGate:
    """Routes navigations to authenticated or unauthenticated screens."""

    def __init__(
        self,
        store: SessionStore,
        *,
        on_change: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self._store = store
        self._on_change = on_change
        self._authenticated = store.is_authenticated()
        self._unsubscribe = store.subscribe(self._handle_auth_change)

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def resolve(self, path: str) -> str:
        """Return the screen to present for a requested path."""
        if path in _PUBLIC_SCREENS:
            return DASHBOARD if self._authenticated else path
        # The dashboard, "/" and unknown paths
        return DASHBOARD if self._authenticated else LOGIN

    def close(self) -> None:
        """Stop following the session store."""
        self._unsubscribe()

    def _handle_auth_change(self) -> None:
        # The notification carries no state; ask the store
        self._authenticated = self._store.is_authenticated()
        logger.debug(f"Session gate now authenticated={self._authenticated}")
        if self._on_change:
            self._on_change(self._authenticated)
