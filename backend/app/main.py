"""
Notekeeper Backend — FastAPI Application Factory
==================================================

What:  Builds the ASGI application served by uvicorn (`uvicorn app.main:app`).
How:   create_app() wires middleware, error mapping and routers onto a fresh
       FastAPI instance; the module-level `app` is the one uvicorn loads.

    ┌──────────────────────────────────────────────────────────┐
    │ Request ID → Access Log → CORS → router                  │
    │                                                          │
    │ /api/notes  POST /create · PATCH /update/{id}            │
    │             GET /all · GET /{id}        (bearer auth)    │
    │ /health                                                  │
    │                                                          │
    │ NotekeeperError.status_code → {"message": ...}           │
    │ 400 validation · 401 auth · 404 not found · 500 store    │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import NotekeeperError, UnauthenticatedError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, notes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "asyncpg")


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """Route all application logs to stdout at the configured level."""
    logging.basicConfig(
        level=level or settings.log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Notekeeper Backend %s starting (log level %s)", __version__, settings.log_level)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Still start: /health answers and every note route returns 401
        logger.error("%s", e)

    logger.info("Listening on http://%s:%d (docs at /docs)", settings.backend_host, settings.backend_port)

    yield

    await dispose_engine()
    logger.info("Notekeeper Backend stopped; database pool closed")


# ══════════════════════════════════════════════════════════════════════════
# Error Mapping
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"message": ...}` bodies.

    NotekeeperError subclasses carry their own status_code (400/401/404/500).
    A body FastAPI cannot parse is a 400; anything else is a logged 500.
    The `context` dict of an error is written to the log only.
    """

    @app.exception_handler(NotekeeperError)
    async def handle_notekeeper_error(request: Request, exc: NotekeeperError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s %s failed: %s | %s", rid, request.method, request.url.path, exc.message, exc.context)
        elif exc.status_code != 401:
            logger.info("[%s] %s: %s | %s", rid, type(exc).__name__, exc.message, exc.context)

        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError):
        logger.info("[%s] Unparseable request to %s: %s", request_id_var.get(""), request.url.path, exc.errors())
        return error_response(400, "Invalid request body")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unhandled %s", request_id_var.get(""), type(exc).__name__, exc_info=exc)
        return error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Notekeeper API",
        description="Per-user notes: create, update, fetch and paginate notes owned by the caller.",
        version=__version__,
        lifespan=lifespan,
    )

    # Added last runs first: RequestID wraps Logging wraps CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
