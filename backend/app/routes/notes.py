"""
Notekeeper Backend — Notes Route Handlers
===========================================

What:  HTTP surface of the notes resource.
       POST  /api/notes/create        create a note
       PATCH /api/notes/update/{id}   partial update
       GET   /api/notes/all           paginated list
       GET   /api/notes/{id}          single note
How:   Each route resolves the caller (get_current_user) and the store
       (get_note_store) through Depends, delegates to NoteService and wraps
       the result in its JSON envelope.

`/all` is registered before `/{note_id}` so that it is not captured as an id.
Path ids are taken as plain strings; NoteService answers malformed ids with
400 "Invalid note ID format" rather than FastAPI's 422.
"""

import logging

from fastapi import APIRouter, Depends, Path, Query

from app.schemas.note import (
    CreatedEnvelope,
    DataEnvelope,
    ErrorResponse,
    NoteCreateRequest,
    NoteListEnvelope,
    NoteResponse,
    NoteUpdateRequest,
)
from app.security import AuthenticatedUser, get_current_user
from app.services.note_service import note_service
from app.services.note_store import NoteStore, get_note_store

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/notes", tags=["Notes"])

_errors = {
    401: {"description": "Missing or invalid credentials", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "/create",
    status_code=201,
    response_model=CreatedEnvelope[NoteResponse],
    responses={400: {"description": "Invalid title or content", "model": ErrorResponse}, **_errors},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: NoteStore = Depends(get_note_store),
) -> CreatedEnvelope[NoteResponse]:
    note = await note_service.create_note(
        store=store,
        owner_id=user.id,
        title=payload.title,
        content=payload.content,
    )
    return CreatedEnvelope[NoteResponse](data=note)


@router.patch(
    "/update/{note_id}",
    response_model=DataEnvelope[NoteResponse],
    responses={
        400: {"description": "Invalid id, title or content", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        **_errors,
    },
    summary="Update a note's title and/or content",
)
async def update_note(
    payload: NoteUpdateRequest,
    note_id: str = Path(description="Note id (UUID v4)"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: NoteStore = Depends(get_note_store),
) -> DataEnvelope[NoteResponse]:
    """
    Partial update: only fields present in the body are changed.

    `{"content": "x"}` keeps the title; `{}` only refreshes updatedAt.
    """
    fields = payload.model_dump(include=payload.model_fields_set)
    note = await note_service.update_note(
        store=store,
        owner_id=user.id,
        note_id=note_id,
        fields=fields,
    )
    return DataEnvelope[NoteResponse](data=note)


@router.get(
    "/all",
    response_model=NoteListEnvelope,
    responses={400: {"description": "Invalid pagination parameters", "model": ErrorResponse}, **_errors},
    summary="List the caller's notes, most recently updated first",
)
async def list_notes(
    page: str | None = Query(default=None, description="Page number, 1-based (default 1)"),
    limit: str | None = Query(default=None, description="Items per page, clamped to 1-100 (default 20)"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: NoteStore = Depends(get_note_store),
) -> NoteListEnvelope:
    """
    Example:
        GET /api/notes/all?page=2&limit=10
        → 10 notes, pagination {total: 25, page: 2, limit: 10, totalPages: 3,
          hasNextPage: true, hasPreviousPage: true}
    """
    return await note_service.list_notes(
        store=store,
        owner_id=user.id,
        page=page,
        limit=limit,
    )


@router.get(
    "/{note_id}",
    response_model=DataEnvelope[NoteResponse],
    responses={
        400: {"description": "Invalid note id", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        **_errors,
    },
    summary="Get a single note by id",
)
async def get_note(
    note_id: str = Path(description="Note id (UUID v4)"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: NoteStore = Depends(get_note_store),
) -> DataEnvelope[NoteResponse]:
    note = await note_service.get_note(store=store, owner_id=user.id, note_id=note_id)
    return DataEnvelope[NoteResponse](data=note)
