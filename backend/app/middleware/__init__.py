# Middleware package init
"""
Notekeeper Backend — Middleware Package
=========================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Access Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line and any exception handler
    output carry the same correlation id.
"""
