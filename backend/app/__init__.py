"""
Notekeeper Backend — Application Package
==========================================

Layered layout:

    ┌─────────────────────────────────────┐
    │    Routes + Authorization Gate      │  ← HTTP concerns, caller identity
    ├─────────────────────────────────────┤
    │   Services (validation, NoteService)│  ← Rules and orchestration
    ├─────────────────────────────────────┤
    │        Note Store (Protocol)        │  ← Owner-scoped persistence
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
