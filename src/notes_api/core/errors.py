"""
Repository Errors

Failure taxonomy surfaced by the data-access layer:

    NotesError
    ├── NoteNotFoundError  - an id-scoped operation matched zero rows
    └── StorageError       - anything else the store (or row mapping) raised

Request validation failures never reach the repository; the HTTP layer
rejects them before any storage call.
"""


class NotesError(Exception):
    """Base class for data-access failures."""


class NoteNotFoundError(NotesError):
    """No note exists with the requested id. An expected outcome, not a fault."""

    def __init__(self, note_id: int):
        self.note_id = note_id
        super().__init__(f"note {note_id} not found")


class StorageError(NotesError):
    """
    The underlying store failed (connectivity, constraint, timeout, mapping).

    The message is intentionally opaque; the original exception is chained
    as ``__cause__``.
    """

    def __init__(self, operation: str, message: str = "storage failure"):
        self.operation = operation
        super().__init__(f"{operation}: {message}")
