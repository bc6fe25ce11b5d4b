"""
Notekeeper Backend — Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract between clients and backend.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Wire format:
    Responses use camelCase keys (createdAt, totalPages, ...). Models are
    declared with snake_case attributes and a camelCase alias generator;
    routes serialize by alias.

Request bodies are deliberately loose (`title: Any`): the rules for
title/content live in app.services.validation so that a wrong type gets the
same "Title is required" answer as a missing value instead of FastAPI's
generic 422.
"""

import uuid
from datetime import datetime
from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for response models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreateRequest(BaseModel):
    """Body of POST /api/notes/create."""

    title: Any = Field(default=None, description="Note title (1-255 characters)")
    content: Any = Field(default=None, description="Note body (optional, defaults to empty)")

    model_config = ConfigDict(extra="ignore")


class NoteUpdateRequest(BaseModel):
    """
    Body of PATCH /api/notes/update/{id}.

    Only the fields present in the JSON body are applied; presence is read
    from `model_fields_set`, so `{}` changes nothing but updatedAt and
    `{"content": null}` clears the content.
    """

    title: Any = Field(default=None, description="New title (optional)")
    content: Any = Field(default=None, description="New content (optional)")

    model_config = ConfigDict(extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(CamelModel):
    """A single note as returned to its owner."""

    id: uuid.UUID = Field(description="Unique note identifier (UUID v4)")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC ISO 8601)")


class PaginationMeta(CamelModel):
    """Pagination envelope for GET /api/notes/all."""

    total: int = Field(description="Total number of notes owned by the caller")
    page: int = Field(description="Current page (1-based)")
    limit: int = Field(description="Page size")
    total_pages: int = Field(description="ceil(total / limit)")
    has_next_page: bool
    has_previous_page: bool


class CreatedEnvelope(CamelModel, Generic[T]):
    """Body of 201 responses: `{data}`."""

    data: T


class DataEnvelope(CamelModel, Generic[T]):
    """Body of 200 responses: `{success, data}`."""

    success: bool = True
    data: T


class NoteListEnvelope(CamelModel):
    """Body of GET /api/notes/all."""

    success: bool = True
    data: List[NoteResponse]
    pagination: PaginationMeta


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Example:
        {"message": "Note not found"}
    """

    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

