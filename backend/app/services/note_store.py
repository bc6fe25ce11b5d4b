"""
Notekeeper Backend — Note Store
=================================

What:  Persistence boundary for notes: a structural `NoteStore` protocol and
       its SQLAlchemy implementation.
How:   Every method is owner-scoped. Lookups and updates filter on
       `id = :id AND owner_id = :owner` in a single statement, so "not found"
       and "owned by someone else" are the same outcome.
       Each call runs in its own session/transaction taken from the session
       factory; reads issued with asyncio.gather use separate connections.
Who:   NoteService depends on the protocol; routes inject the SQLAlchemy
       implementation via `get_note_store`.
"""

import logging
import uuid
from typing import Dict, List, Optional, Protocol

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import async_session_factory
from app.models.note import Note, utc_now

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Contract for owner-scoped note persistence."""

    async def create(self, owner_id: str, title: str, content: str) -> Note: ...

    async def find_first(self, note_id: uuid.UUID, owner_id: str) -> Optional[Note]: ...

    async def update(
        self, note_id: uuid.UUID, owner_id: str, changes: Dict[str, str],
    ) -> Optional[Note]: ...

    async def find_many(self, owner_id: str, skip: int, take: int) -> List[Note]: ...

    async def count(self, owner_id: str) -> int: ...


class SqlAlchemyNoteStore:
    """NoteStore backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, owner_id: str, title: str, content: str) -> Note:
        now = utc_now()
        note = Note(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        async with self._session_factory() as session:
            async with session.begin():
                session.add(note)
        logger.debug("Inserted note %s for owner %s", note.id, owner_id)
        return note

    async def find_first(self, note_id: uuid.UUID, owner_id: str) -> Optional[Note]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Note).where(Note.id == note_id, Note.owner_id == owner_id)
            )
            return result.scalar_one_or_none()

    async def update(
        self, note_id: uuid.UUID, owner_id: str, changes: Dict[str, str],
    ) -> Optional[Note]:
        """
        Apply `changes` (title/content only) to the owner's note.

        Keys missing from `changes` are left as stored. updated_at is always
        refreshed. Returns None when no note matches id and owner.
        """
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    select(Note)
                    .where(Note.id == note_id, Note.owner_id == owner_id)
                    .with_for_update()
                )
                note = result.scalar_one_or_none()
                if note is None:
                    return None
                for field in ("title", "content"):
                    if field in changes:
                        setattr(note, field, changes[field])
                note.updated_at = utc_now()
        return note

    async def find_many(self, owner_id: str, skip: int, take: int) -> List[Note]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Note)
                .where(Note.owner_id == owner_id)
                .order_by(desc(Note.updated_at))
                .offset(skip)
                .limit(take)
            )
            return list(result.scalars().all())

    async def count(self, owner_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(Note.id)).where(Note.owner_id == owner_id)
            )
            return result.scalar() or 0


def get_note_store() -> NoteStore:
    """FastAPI dependency returning the application's note store."""
    return SqlAlchemyNoteStore(async_session_factory)
