"""Session store: token, identity and authentication change notifications."""

import json
import logging
from typing import Callable, Optional

from ..domain.models import Identity, Session
from ..domain.protocols import AuthApi, KeyValueStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"

Listener = Callable[[], None]


class SessionStore:
    """Single authority for whether a usable session exists.

    The token is the sole authority for "authenticated": without a token
    the persisted identity is ignored. State is read synchronously from
    storage at construction, so an already logged-in user is seen as
    authenticated before any I/O happens.

    Listeners take no arguments and are called synchronously after every
    transition between anonymous and authenticated; they re-read the
    state from the store.

    Logging in over an existing session is a logout followed by a login,
    so listeners see both transitions.
    """

    def __init__(self, storage: KeyValueStorage, auth_api: AuthApi) -> None:
        self._storage = storage
        self._auth_api = auth_api
        self._listeners: list[Listener] = []
        self._emitting = False
        self._queued = 0
        self._authenticated = self.is_authenticated()

    @property
    def token(self) -> Optional[str]:
        """Persisted bearer token, or None."""
        return self._storage.get(TOKEN_KEY) or None

    @property
    def identity(self) -> Optional[Identity]:
        """Persisted identity, or None when there is no token."""
        if not self.token:
            return None
        raw = self._storage.get(USER_KEY)
        if not raw:
            return Identity(email="")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable persisted user identity")
            return Identity(email="")
        if not isinstance(data, dict):
            return Identity(email="")
        return Identity.from_dict(data)

    @property
    def session(self) -> Optional[Session]:
        """Current session, or None when anonymous."""
        token = self.token
        if not token:
            return None
        return Session(token=token, identity=self.identity or Identity(email=""))

    def is_authenticated(self) -> bool:
        """True iff a non-empty token is currently persisted."""
        return bool(self._storage.get(TOKEN_KEY))

    async def login(self, email: str, password: str) -> Session:
        """Authenticate with email and password.

        The authenticator only returns a token, so the identity keeps just
        the email and the display name falls back to its local part.

        Raises:
            AuthError: credentials rejected
            NetworkError: authenticator unreachable
        """
        token = await self._auth_api.login(email, password)
        session = Session(token=token, identity=Identity(email=email))
        self._persist(session)
        logger.info(f"Logged in as {email}")
        return session

    async def register(self, name: str, email: str, password: str) -> Session:
        """Create an account and start a session with it.

        Raises:
            AuthError: registration rejected
            NetworkError: authenticator unreachable
        """
        result = await self._auth_api.register(name, email, password)
        session = Session(
            token=result.token,
            identity=Identity(email=result.email, name=result.name),
        )
        self._persist(session)
        logger.info(f"Registered and logged in as {result.email}")
        return session

    def logout(self) -> None:
        """Clear the persisted session. Always succeeds."""
        self._storage.remove(TOKEN_KEY, USER_KEY)
        logger.info("Logged out")
        self._sync()

    def invalidate(self, reason: str = "session invalidated") -> None:
        """End the session because something outside the user's control said so."""
        if self.is_authenticated():
            logger.warning(f"Session invalidated: {reason}")
        self._storage.remove(TOKEN_KEY, USER_KEY)
        self._sync()

    def reload(self) -> bool:
        """Re-read persisted storage and notify if the state flipped.

        Returns:
            Current authentication state
        """
        self._sync()
        return self._authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for authentication transitions.

        Returns:
            Callable that deregisters the listener; calling it twice is harmless
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _persist(self, session: Session) -> None:
        if self.is_authenticated():
            # Switching accounts ends the old session before the new one starts
            logger.info("Replacing the current session")
            self._storage.remove(TOKEN_KEY, USER_KEY)
            self._sync()
        self._storage.set_items(
            {
                TOKEN_KEY: session.token,
                USER_KEY: json.dumps(session.identity.to_dict()),
            }
        )
        self._sync()

    def _sync(self) -> None:
        authenticated = self.is_authenticated()
        if authenticated == self._authenticated:
            return
        self._authenticated = authenticated
        self._emit()

    def _emit(self) -> None:
        # A listener may cause another transition; deliver it after this round
        self._queued += 1
        if self._emitting:
            return
        self._emitting = True
        try:
            while self._queued:
                self._queued -= 1
                for listener in list(self._listeners):
                    try:
                        listener()
                    except Exception:
                        logger.exception("Session listener failed")
        finally:
            self._emitting = False
