"""
Notes Database Models

SQLAlchemy 2.0 ORM mappings for the notes store.

Tables:
    notes       - Note rows, with a GIN text-search index over the title
                  and a btree index over (created_at, id) for seek paging.
    notes_audit - Append-only log of note mutations (currently "create").
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, String, Text, func, literal_column
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from notes_api.models.base import Base, CreatedAtMixin

# Text-search configuration: plain tokenization, lower-cased, no stemming
TS_CONFIG = "simple"


class NoteRecord(Base, CreatedAtMixin):
    """
    Persistent note row.

    Attributes:
        id: BIGSERIAL primary key, assigned by the database.
        title: Non-empty title, covered by the full-text index.
        content: Non-empty body text.
        created_at: Insertion timestamp (server-side default).
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title='{self.title[:20]}')>"


class NoteAuditRecord(Base, CreatedAtMixin):
    """
    Audit entry written in the same transaction as the note it references.

    Never read back by the application.
    """

    __tablename__ = "notes_audit"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    note_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<NoteAuditRecord(note_id={self.note_id}, action='{self.action}')>"


def title_tsvector() -> ColumnElement:
    """
    ``to_tsvector('simple', title)``.

    The config is rendered inline so queries match the index expression.
    """
    return func.to_tsvector(literal_column(f"'{TS_CONFIG}'"), NoteRecord.title)


def title_tsquery(query: ColumnElement) -> ColumnElement:
    """``plainto_tsquery('simple', <query>)``."""
    return func.plainto_tsquery(literal_column(f"'{TS_CONFIG}'"), query)


Index("ix_notes_title_fts", title_tsvector(), postgresql_using="gin")
Index("ix_notes_created_at_id", NoteRecord.created_at, NoteRecord.id)
