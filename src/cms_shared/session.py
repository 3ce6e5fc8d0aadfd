"""Operator session: token + user, hydrated from and persisted to ClientStorage."""

import json
import logging

from pydantic import ValidationError

from cms_shared.config import SESSION_NAMESPACE, TOKEN_STORAGE_KEY
from cms_shared.models import SessionState, User
from cms_shared.storage import ClientStorage

logger = logging.getLogger(__name__)

PERSIST_VERSION = 0


class SessionContext:
    """
    Explicit session object handed to the API gateway and the route guard.

    Lifecycle:
      hydrate(storage)  read the persisted namespace blob at startup
      login(token, u)   persist the token key and the blob
      logout()          clear both (operator action)
      expire()          API answered 401: drop the token key and the namespace
    """

    def __init__(self, storage: ClientStorage):
        self._storage = storage
        self.token: str | None = None
        self.user: User | None = None
        self.is_authenticated = False

    @classmethod
    def hydrate(cls, storage: ClientStorage) -> "SessionContext":
        session = cls(storage)
        raw = storage.get_item(SESSION_NAMESPACE)
        if not raw:
            return session

        try:
            state = SessionState.model_validate(json.loads(raw).get("state", {}))
        except (ValueError, AttributeError, ValidationError):
            logger.warning("Discarding unreadable session blob under %s", SESSION_NAMESPACE)
            storage.remove_item(SESSION_NAMESPACE)
            return session

        session.token = state.token
        session.user = state.user
        session.is_authenticated = bool(state.isAuthenticated and state.token)
        return session

    def state(self) -> SessionState:
        return SessionState(
            token=self.token,
            user=self.user,
            isAuthenticated=self.is_authenticated,
        )

    def _persist(self) -> None:
        blob = {"state": self.state().model_dump(), "version": PERSIST_VERSION}
        self._storage.set_item(SESSION_NAMESPACE, json.dumps(blob))

    def login(self, token: str, user: User) -> None:
        self._storage.set_item(TOKEN_STORAGE_KEY, token)
        self.token = token
        self.user = user
        self.is_authenticated = True
        self._persist()
        logger.info("Session started for %s (%s)", user.email, user.role)

    def logout(self) -> None:
        self._storage.remove_item(TOKEN_STORAGE_KEY)
        self.token = None
        self.user = None
        self.is_authenticated = False
        self._persist()
        logger.info("Session closed")

    def expire(self) -> None:
        self._storage.remove_item(TOKEN_STORAGE_KEY)
        self._storage.remove_item(SESSION_NAMESPACE)
        self.token = None
        self.user = None
        self.is_authenticated = False
        logger.warning("Session expired or invalid (401); credentials cleared")
