"""
Notekeeper Backend — Input Validation
=======================================

What:  Pure functions validating note titles/content, note identifiers and
       pagination query values.
How:   Each function either returns the normalized value or raises one of the
       ValidationError subclasses from app.exceptions (mapped to 400).
Who:   Called by NoteService before any store access.

Rules:
    Title        string, stripped length >= 1, raw length <= 255
    Content      optional string taken as-is; missing -> ""
    Identifier   UUID v4 shape, hex case-insensitive, hyphens optional
    page         max(1, int(page)), default 1
    limit        clamp(int(limit), 1, 100), default 20
"""

import math
import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from app.config import settings
from app.exceptions import (
    InvalidIdentifierError,
    InvalidPaginationError,
    InvalidTitleError,
    ValidationError,
)

TITLE_MAX_LENGTH = 255

NOTE_ID_PATTERN = re.compile(
    r"[0-9a-f]{8}-?[0-9a-f]{4}-?4[0-9a-f]{3}-?[89ab][0-9a-f]{3}-?[0-9a-f]{12}",
    re.IGNORECASE,
)

# Leading integer of a query value: "  12abc" -> "12", "-3" -> "-3"
_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")

# Largest row offset a signed 64-bit OFFSET accepts (SQLite INTEGER, Postgres BIGINT)
MAX_OFFSET = 2**63 - 1


# ── Title / Content ───────────────────────────────────────────────────────

def validate_title(title: Any) -> str:
    """Return the title unchanged if valid, otherwise raise InvalidTitleError."""
    if not isinstance(title, str) or not title.strip():
        raise InvalidTitleError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidTitleError(
            "Title is too long",
            context={"length": len(title), "max_length": TITLE_MAX_LENGTH},
        )
    return title


def validate_content(content: Any) -> str:
    if content is None:
        return ""
    if not isinstance(content, str):
        raise ValidationError("Content must be a string", field="content")
    return content


def validate_note_input(title: Any, content: Any = None) -> Tuple[str, str]:
    """
    Validate a create payload.

    Returns:
        (title, content) with content normalized to "" when absent.
    """
    return validate_title(title), validate_content(content)


def validate_note_changes(fields: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate the fields present in an update payload.

    Only keys that are present are checked and returned; absent keys stay
    absent so the store leaves those columns untouched.
    """
    changes: Dict[str, str] = {}
    if "title" in fields:
        changes["title"] = validate_title(fields["title"])
    if "content" in fields:
        changes["content"] = validate_content(fields["content"])
    return changes


# ── Identifier ────────────────────────────────────────────────────────────

def is_valid_note_id(value: Optional[str]) -> bool:
    return bool(value) and NOTE_ID_PATTERN.fullmatch(value) is not None


def parse_note_id(value: Optional[str]) -> uuid.UUID:
    """
    Validate an identifier and return it as a UUID.

    Accepts the hyphenated and the bare 32-digit forms; the returned UUID
    always renders in canonical lowercase hyphenated form.
    """
    if not is_valid_note_id(value):
        raise InvalidIdentifierError(value)
    return uuid.UUID(value)


# ── Pagination ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Pagination:
    """Validated page/limit with derived offset."""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def meta(self, total: int) -> Dict[str, Any]:
        """Envelope fields once the store has reported the total count."""
        total_pages = self.total_pages(total)
        return {
            "total": total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": total_pages,
            "has_next_page": self.page < total_pages,
            "has_previous_page": self.page > 1,
        }


def _parse_int(raw: str) -> Optional[int]:
    match = _INT_PREFIX.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def parse_pagination(page: Optional[str] = None, limit: Optional[str] = None) -> Pagination:
    """
    Turn raw query values into a Pagination.

    Absent or empty values fall back to page 1 and the configured default
    page size. Out-of-range numbers are clamped; values without a leading
    integer raise InvalidPaginationError.
    """
    max_limit = settings.max_page_size

    page_value = 1
    if page:
        parsed = _parse_int(page)
        if parsed is None:
            raise InvalidPaginationError(context={"page": page})
        page_value = max(1, parsed)

    limit_value = settings.default_page_size
    if limit:
        parsed = _parse_int(limit)
        if parsed is None:
            raise InvalidPaginationError(context={"limit": limit})
        limit_value = min(max_limit, max(1, parsed))

    if page_value < 1 or limit_value < 1 or limit_value > max_limit:
        raise InvalidPaginationError(context={"page": page, "limit": limit})

    # Pages past the last representable offset are clamped like limit
    page_value = min(page_value, MAX_OFFSET // limit_value + 1)

    return Pagination(page=page_value, limit=limit_value)
