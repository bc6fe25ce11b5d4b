# Services package init
"""
Notekeeper Backend — Services Layer
=====================================

Service Inventory:
    - validation:  Pure checks for titles, note ids and pagination values
    - note_store:  NoteStore protocol + SQLAlchemy implementation
    - note_service: create / update / get / list orchestration
"""
