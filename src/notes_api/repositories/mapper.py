"""
Row Mapper

Converts raw result rows into ``Note`` entities. Shared by every read path.
A row that cannot be mapped is a storage failure; it is never skipped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from notes_api.core.errors import StorageError
from notes_api.models import Note

NOTE_COLUMNS = ("id", "title", "content", "created_at")


def _as_mapping(row: Any) -> Mapping[str, Any]:
    # sqlalchemy Row exposes a read-only mapping view via ``_mapping``
    mapping = getattr(row, "_mapping", row)
    if not isinstance(mapping, Mapping):
        raise TypeError(f"unsupported row type: {type(row).__name__}")
    return mapping


def row_to_note(row: Any) -> Note:
    """Map one result row (``Row`` or mapping) to a ``Note``."""
    try:
        mapping = _as_mapping(row)
        return Note.model_validate({name: mapping[name] for name in NOTE_COLUMNS})
    except (KeyError, TypeError, ValidationError) as exc:
        raise StorageError("map_row", "malformed note row") from exc


def rows_to_notes(rows: Iterable[Any]) -> list[Note]:
    """Map every row, preserving order."""
    return [row_to_note(row) for row in rows]
