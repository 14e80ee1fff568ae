"""Tests for the in-memory session store."""

from concurrent.futures import ThreadPoolExecutor

from s3_console.schemas import CredentialRecord
from s3_console.sessions import InMemorySessionStore, SessionStore, new_session_id


def _record(index: int = 0) -> CredentialRecord:
    return CredentialRecord(
        access_key_id=f"AKIA{index}",
        secret_access_key=f"secret{index}",
        region="us-east-1",
    )


class TestSessionIds:
    """Test session id generation."""

    def test_ids_are_long_and_unique(self):
        """Test that ids carry at least 128 bits and do not repeat."""
        ids = {new_session_id() for _ in range(1000)}
        assert len(ids) == 1000
        # 32 bytes of base64url is 43 characters
        assert all(len(session_id) >= 43 for session_id in ids)


class TestInMemorySessionStore:
    """Test session store contract."""

    def test_implements_contract(self):
        """Test that the in-memory store is a SessionStore."""
        assert isinstance(InMemorySessionStore(), SessionStore)

    def test_create_then_get(self):
        """Test that a created session returns the same record."""
        store = InMemorySessionStore()
        record = _record()

        session_id = store.create(record)
        session = store.get(session_id)

        assert session is not None
        assert session.id == session_id
        assert session.credentials == record
        assert session.created_at.tzinfo is not None

    def test_get_unknown(self):
        """Test lookups of unknown or empty ids."""
        store = InMemorySessionStore()
        assert store.get("missing") is None
        assert store.get("") is None
        assert store.get(None) is None

    def test_delete(self):
        """Test that deleted sessions are gone."""
        store = InMemorySessionStore()
        session_id = store.create(_record())

        store.delete(session_id)

        assert store.get(session_id) is None
        assert len(store) == 0

    def test_delete_unknown_is_noop(self):
        """Test that deleting an unknown id does nothing."""
        store = InMemorySessionStore()
        kept = store.create(_record())

        store.delete("missing")

        assert store.get(kept) is not None

    def test_sessions_are_independent(self):
        """Test that two sessions keep their own credentials."""
        store = InMemorySessionStore()
        first = store.create(_record(1))
        second = store.create(_record(2))

        assert first != second
        assert store.get(first).credentials.access_key_id == "AKIA1"
        assert store.get(second).credentials.access_key_id == "AKIA2"

    def test_concurrent_access(self):
        """Test that concurrent create/get/delete loses no updates."""
        store = InMemorySessionStore()

        def lifecycle(index: int) -> bool:
            record = _record(index)
            session_id = store.create(record)
            found = store.get(session_id)
            return found is not None and found.credentials == record

        with ThreadPoolExecutor(max_workers=16) as pool:
            assert all(pool.map(lifecycle, range(500)))
        assert len(store) == 500

        ids = list(store._sessions)
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(store.delete, ids))
        assert len(store) == 0
