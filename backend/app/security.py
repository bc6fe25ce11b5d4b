"""
Notekeeper Backend — Authorization Gate
=========================================

What:  Resolves the authenticated caller for every note route.
How:   `get_current_user` is a FastAPI dependency. It reads an
       `Authorization: Bearer <token>` header, verifies the JWT with the
       configured secret and returns the `sub` claim as the caller id.
       Any failure raises UnauthenticatedError (401) before the route body runs.
Who:   Declared with Depends() on each route in app.routes.notes. Tests mint
       tokens with create_access_token or swap the dependency through
       app.dependency_overrides.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

# auto_error=False: missing credentials surface as our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved for the current request."""

    id: str


def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    """Issue a signed access token whose `sub` is the given user id."""
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes or settings.jwt_exp_minutes)
    payload = {"sub": subject, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Resolve the caller or reject the request.

    Raises:
        UnauthenticatedError: no bearer token, JWT_SECRET unset, invalid/expired token or a
                              token without a subject.
    """
    if credentials is None:
        raise UnauthenticatedError()

    # An empty or placeholder key lets anyone sign a token
    if not settings.jwt_secret_configured:
        logger.error("JWT_SECRET is not configured; rejecting bearer token")
        raise UnauthenticatedError("Invalid or expired token")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.info("Rejected bearer token: %s", str(e))
        raise UnauthenticatedError("Invalid or expired token")

    subject = payload.get("sub")
    if not subject:
        raise UnauthenticatedError("Invalid or expired token")

    return AuthenticatedUser(id=str(subject))
