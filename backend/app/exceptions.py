"""
Notekeeper Backend — Exceptions
=================================

Every error the service raises on purpose derives from NotekeeperError.
The class decides the HTTP status (`status_code`); the instance carries a
client-safe `message` and a `context` dict that only ever reaches the logs.
The single handler in app.main turns any of them into `{"message": ...}`.

    NotekeeperError                 500
    ├── ValidationError             400
    │   ├── InvalidTitleError
    │   ├── InvalidIdentifierError
    │   └── InvalidPaginationError
    ├── UnauthenticatedError        401
    ├── NotFoundError               404
    └── DatabaseError               500
"""

from typing import Any, Dict, Optional


class NotekeeperError(Exception):
    """Base class. Subclasses override `status_code` and `default_message`."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.context = dict(context or {})
        super().__init__(self.message)


class ValidationError(NotekeeperError):
    """Client input was rejected; `field` names the offending input when known."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.field = field
        if field:
            self.context["field"] = field


class InvalidTitleError(ValidationError):
    default_message = "Title is required"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, field="title", context=context)


class InvalidIdentifierError(ValidationError):
    """Path id is not a UUID v4."""

    default_message = "Invalid note ID format"

    def __init__(self, value: Optional[str] = None):
        super().__init__(field="id", context=None if value is None else {"value": value})


class InvalidPaginationError(ValidationError):
    default_message = "Invalid pagination parameters"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(context=context)


class UnauthenticatedError(NotekeeperError):
    """No usable bearer token. Answered with `WWW-Authenticate: Bearer`."""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(NotekeeperError):
    """
    The resource does not exist for this caller.

    Notes owned by someone else raise exactly the same error, so an id
    cannot be probed across accounts.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {}, resource=resource)
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(f"{resource} not found", ctx)


class DatabaseError(NotekeeperError):
    """A store call failed. `message` is the generic text for the operation."""

    default_message = "A database error occurred. Please try again later."
