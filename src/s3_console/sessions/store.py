"""Session storage keyed by an opaque, unguessable id.

The browser cookie carries only the session id; credentials never leave
the server. Sessions live until disconnect or process restart.
"""

import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from s3_console.core import get_logger
from s3_console.schemas import CredentialRecord

logger = get_logger(__name__)

# 32 random bytes, 256 bits of entropy
SESSION_ID_BYTES = 32


def new_session_id() -> str:
    """Generate a URL-safe session id from the OS CSPRNG."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


@dataclass(frozen=True)
class Session:
    """Credentials bound to one browser session."""

    id: str
    credentials: CredentialRecord
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore(ABC):
    """Contract every session backend implements."""

    @abstractmethod
    def create(self, record: CredentialRecord) -> str:
        """Store ``record`` under a fresh session id and return the id."""

    @abstractmethod
    def get(self, session_id: Optional[str]) -> Optional[Session]:
        """Return the session for ``session_id``, or None if unknown."""

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Forget ``session_id``. Unknown ids are ignored."""


class InMemorySessionStore(SessionStore):
    """Process-local store for single-instance deployments.

    All access goes through one lock, so concurrent requests referencing the
    same session never observe a partial update.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, record: CredentialRecord) -> str:
        with self._lock:
            session_id = new_session_id()
            while session_id in self._sessions:
                session_id = new_session_id()
            self._sessions[session_id] = Session(id=session_id, credentials=record)

        logger.info("Session created", region=record.region)
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)

        if removed is not None:
            logger.info("Session deleted")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
