"""
Session persistence.

Stores the signed-in UserSession in the local state file so it survives
restarts. A stored value that no longer parses is treated as "no session".
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.local_store import LocalStore

from .interfaces import ISessionStore
from .models import UserSession

logger = logging.getLogger(__name__)

USER_SESSION_KEY = "geminiFilterFusionUser"


class SessionStore(ISessionStore):
    """Token store backed by a LocalStore key."""

    def __init__(self, local_store: LocalStore, key: str = USER_SESSION_KEY) -> None:
        self._local = local_store
        self._key = key

    def save(self, session: UserSession) -> None:
        if not self._local.set(self._key, session.model_dump(mode="json", by_alias=True)):
            logger.error("Could not save user session to local storage")

    def load(self) -> Optional[UserSession]:
        data = self._local.get(self._key)
        if data is None:
            return None
        try:
            return UserSession.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Could not load user session from local storage: {e}")
            return None

    def clear(self) -> None:
        if not self._local.remove(self._key):
            logger.error("Could not clear user session from local storage")
