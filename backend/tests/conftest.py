"""
Notekeeper Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_store:     AsyncMock NoteStore (service unit tests, no DB)
    ├── make_note:      Factory for transient Note ORM instances
    ├── sqlite_store:   SqlAlchemyNoteStore on a fresh SQLite file per test
    ├── test_client:    HTTPX AsyncClient against the app, store overridden
    └── auth_headers:   Factory returning bearer headers for a user id
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock

# Override settings for testing BEFORE any app imports
_tmp_dir = tempfile.mkdtemp(prefix="notekeeper_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/app.db"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from app.database import Base, build_engine, build_session_factory  # noqa: E402
from app.models.note import Note  # noqa: E402
from app.security import create_access_token  # noqa: E402
from app.services.note_store import SqlAlchemyNoteStore, get_note_store  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_store():
    """
    Provides a NoteStore double.

    Usage:
        mock_store.find_first.return_value = make_note(owner_id="alice")
        result = await service.get_note(mock_store, "alice", note_id)
    """
    store = AsyncMock()
    store.create = AsyncMock()
    store.find_first = AsyncMock(return_value=None)
    store.update = AsyncMock(return_value=None)
    store.find_many = AsyncMock(return_value=[])
    store.count = AsyncMock(return_value=0)
    return store


@pytest.fixture
def make_note():
    """Factory for Note instances that never touch a session."""

    def _make(
        owner_id: str = "alice",
        title: str = "Groceries",
        content: str = "eggs, milk",
        note_id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> Note:
        now = datetime.now(timezone.utc)
        return Note(
            id=note_id or uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            created_at=created_at or now,
            updated_at=updated_at or created_at or now,
        )

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (SQLite through aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """A real SqlAlchemyNoteStore on an isolated SQLite database."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path}/notes.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield SqlAlchemyNoteStore(build_session_factory(engine))
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def test_client(sqlite_store):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The note store dependency is pointed at the per-test SQLite store;
    authentication is exercised for real with tokens from auth_headers.
    """
    from app.main import app

    app.dependency_overrides[get_note_store] = lambda: sqlite_store
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Returns a function building Authorization headers for a user id."""

    def _headers(user_id: str = "alice") -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
