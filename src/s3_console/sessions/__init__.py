"""Server-side session storage."""

from .store import InMemorySessionStore, Session, SessionStore, new_session_id

__all__ = ["InMemorySessionStore", "Session", "SessionStore", "new_session_id"]
