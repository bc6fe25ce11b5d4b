# Routes package init
"""
Notekeeper Backend — API Routes Package
=========================================

Route Inventory:
    - notes.py:   POST  /api/notes/create
                  PATCH /api/notes/update/{id}
                  GET   /api/notes/all
                  GET   /api/notes/{id}
    - health.py:  GET   /health

Routes stay thin: resolve the caller and the store, call NoteService,
return the envelope.
"""
