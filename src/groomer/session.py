"""Explicit session context carrying credentials for store calls."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Signed-in user as reported by the backend."""

    id: int
    username: str
    full_name: str = ""
    role: str = "USER"
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


class SessionContext:
    """Holds the bearer token and current user for one process lifetime.

    Lifecycle: ``start`` on sign-in or startup, ``invalidate`` when the store
    answers 401, ``close`` on explicit logout. Listeners registered with
    ``on_invalidate`` are told when the session was dropped by the store so
    they can send the user back to sign-in.
    """

    def __init__(self, token: Optional[str] = None, user: Optional[SessionUser] = None):
        self._token = token
        self._user = user
        self._listeners: list[Callable[["SessionContext"], None]] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def start(self, token: str, user: Optional[SessionUser] = None) -> None:
        if not token or not token.strip():
            raise ValueError("Session token cannot be empty")
        self._token = token.strip()
        self._user = user
        logger.info("Session started for %s", user.username if user else "anonymous user")

    def auth_headers(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def on_invalidate(self, listener: Callable[["SessionContext"], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def invalidate(self) -> None:
        """Drop credentials after the store rejected them."""
        was_authenticated = self.is_authenticated
        self._token = None
        self._user = None
        if was_authenticated:
            logger.warning("Session invalidated by the store")
        for listener in list(self._listeners):
            listener(self)

    def close(self) -> None:
        """Explicit logout. Listeners are not notified."""
        self._token = None
        self._user = None
        self._listeners.clear()
        logger.info("Session closed")
