"""
Notekeeper Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SqlAlchemyNoteStore for CRUD operations and by Alembic.

Table Design:
    - UUID primary key, generated in Python (uuid4) so every backend
      receives an id of the same version-4 shape the API validates
    - owner_id: identity of the creating user; every query filters on it
    - title: VARCHAR(255), matching the API limit
    - content: TEXT, no length cap
    - created_at / updated_at: UTC with timezone

    Index on (owner_id, updated_at DESC):
        Serves the list query "this owner's notes, most recently updated
        first" and the matching COUNT(*).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A note owned by exactly one user.

    Lifecycle:
        1. Created by POST /api/notes/create (owner = caller)
        2. Title/content changed by PATCH /api/notes/update/{id}; updated_at refreshed
        3. Never deleted through the API
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier (UUID v4)",
    )

    # Never mutated after insert
    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Identifier of the user who created the note",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Note title, 1-255 characters",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Note body, empty string when not provided",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        comment="When this note was last modified (UTC)",
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, owner_id='{self.owner_id}', "
            f"updated_at='{self.updated_at}')>"
        )


# Serves the owner-scoped list query and its count
Index("idx_notes_owner_updated_at", Note.owner_id, Note.updated_at.desc())
