"""Repositories package."""

from notes_api.repositories.base import NoteStore
from notes_api.repositories.listing import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    ListParams,
    ListStrategy,
    clamp_limit,
    select_strategy,
)
from notes_api.repositories.mapper import row_to_note, rows_to_notes
from notes_api.repositories.notes import NoteRepository

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "ListParams",
    "ListStrategy",
    "NoteRepository",
    "NoteStore",
    "clamp_limit",
    "row_to_note",
    "rows_to_notes",
    "select_strategy",
]
