"""Models package - ORM mappings and the Note entity."""

from notes_api.models.base import Base, CreatedAtMixin
from notes_api.models.note import Note
from notes_api.models.orm import (
    TS_CONFIG,
    NoteAuditRecord,
    NoteRecord,
    title_tsquery,
    title_tsvector,
)

__all__ = [
    # SQLAlchemy ORM (persistence layer)
    "Base",
    "CreatedAtMixin",
    "NoteAuditRecord",
    "NoteRecord",
    "TS_CONFIG",
    "title_tsquery",
    "title_tsvector",
    # Entity returned to callers
    "Note",
]
