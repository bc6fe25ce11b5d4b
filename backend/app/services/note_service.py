"""
Notekeeper Backend — Note Service (Business Logic Orchestrator)
=================================================================

What:  The four note operations: create, update, get-one, list.
How:   Each operation runs validate → ownership-scoped store call → response
       shaping. Store failures are wrapped in DatabaseError with a generic
       per-operation message; already-classified errors (validation,
       not-found) propagate unchanged.
Who:   Called by the route handlers in app.routes.notes with the caller's
       identity and an injected NoteStore.

Orchestration Flow (PATCH /api/notes/update/{id}):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  Validate   │───▶│  find_first  │───▶│  update  │
    │ (caller) │    │  id + body  │    │ (id, owner)  │    │ (merge)  │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

NoteService is stateless: the store is passed in for each call, so tests can
hand it an AsyncMock and routes can hand it the SQLAlchemy store.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.exceptions import DatabaseError, NotekeeperError, NotFoundError
from app.models.note import Note
from app.schemas.note import NoteListEnvelope, NoteResponse, PaginationMeta
from app.services.note_store import NoteStore
from app.services.validation import (
    parse_note_id,
    parse_pagination,
    validate_note_changes,
    validate_note_input,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        created_at=_as_utc(note.created_at),
        updated_at=_as_utc(note.updated_at),
    )


def _wrap_store_error(operation: str, message: str, exc: Exception, **context: Any) -> DatabaseError:
    """Log an unexpected failure and convert it into a client-safe DatabaseError."""
    logger.error(
        "Error in %s: %s", operation, str(exc),
        exc_info=exc,
        extra={"operation": operation, **context},
    )
    return DatabaseError(
        message=message,
        context={"operation": operation, "error_type": type(exc).__name__, **context},
    )


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note(): validate title/content, insert with owner = caller
        - update_note(): validate id and present fields, owner-scoped merge
        - get_note():    validate id, owner-scoped lookup
        - list_notes():  parse pagination, page + count concurrently

    Error Handling Strategy:
        ValidationError / NotFoundError raised here reach the global
        handlers as-is. Anything else coming out of the store is logged with
        the operation name and re-raised as DatabaseError (500).
    """

    async def create_note(
        self,
        store: NoteStore,
        owner_id: str,
        title: Any,
        content: Any = None,
    ) -> NoteResponse:
        """
        Create a note owned by the caller.

        Raises:
            InvalidTitleError: Title missing/blank/too long (→ 400)
            ValidationError:   Content is not a string (→ 400)
            DatabaseError:     Insert failed (→ 500)
        """
        title, content = validate_note_input(title, content)

        try:
            note = await store.create(owner_id=owner_id, title=title, content=content)
        except Exception as e:
            raise _wrap_store_error("create_note", "Failed to create note", e, owner_id=owner_id)

        logger.info("Note %s created by %s", note.id, owner_id)
        return _to_response(note)

    async def update_note(
        self,
        store: NoteStore,
        owner_id: str,
        note_id: Optional[str],
        fields: Dict[str, Any],
    ) -> NoteResponse:
        """
        Partially update one of the caller's notes.

        Args:
            fields: Only the keys present in the request body. Keys that are
                    absent are not touched by the store.

        Raises:
            InvalidIdentifierError: note_id is not UUID v4 shaped (→ 400)
            InvalidTitleError:      title present but invalid (→ 400)
            NotFoundError:          no note with this id for this owner (→ 404)
            DatabaseError:          store failure (→ 500)
        """
        nid = parse_note_id(note_id)
        changes = validate_note_changes(fields)

        try:
            existing = await store.find_first(note_id=nid, owner_id=owner_id)
            if existing is None:
                raise NotFoundError(resource="Note", resource_id=str(nid))

            updated = await store.update(note_id=nid, owner_id=owner_id, changes=changes)
            if updated is None:
                raise NotFoundError(resource="Note", resource_id=str(nid))
        except NotekeeperError:
            raise
        except Exception as e:
            raise _wrap_store_error("update_note", "Failed to update note", e, note_id=str(nid))

        logger.info("Note %s updated (%s)", nid, ", ".join(sorted(changes)) or "touch")
        return _to_response(updated)

    async def get_note(
        self,
        store: NoteStore,
        owner_id: str,
        note_id: Optional[str],
    ) -> NoteResponse:
        """
        Fetch one of the caller's notes.

        Raises:
            InvalidIdentifierError: note_id is not UUID v4 shaped (→ 400)
            NotFoundError:          no note with this id for this owner (→ 404)
            DatabaseError:          store failure (→ 500)
        """
        nid = parse_note_id(note_id)

        try:
            note = await store.find_first(note_id=nid, owner_id=owner_id)
        except Exception as e:
            raise _wrap_store_error("get_note", "Failed to fetch note", e, note_id=str(nid))

        if note is None:
            raise NotFoundError(resource="Note", resource_id=str(nid))
        return _to_response(note)

    async def list_notes(
        self,
        store: NoteStore,
        owner_id: str,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> NoteListEnvelope:
        """
        List the caller's notes, most recently updated first.

        The page query and the total count are independent reads and are
        awaited together.

        Raises:
            InvalidPaginationError: page/limit not parseable (→ 400)
            DatabaseError:          store failure (→ 500)
        """
        pagination = parse_pagination(page, limit)

        # Every outcome is retrieved, so a second failure is never left pending
        notes, total = await asyncio.gather(
            store.find_many(owner_id=owner_id, skip=pagination.skip, take=pagination.limit),
            store.count(owner_id=owner_id),
            return_exceptions=True,
        )
        for outcome in (notes, total):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                raise _wrap_store_error(
                    "list_notes", "Failed to fetch notes", outcome,
                    page=pagination.page, limit=pagination.limit,
                )

        return NoteListEnvelope(
            success=True,
            data=[_to_response(note) for note in notes],
            pagination=PaginationMeta(**pagination.meta(total)),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
