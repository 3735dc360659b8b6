"""
Note Schemas

Pydantic models for Note API request/response validation.
Request bodies reject empty fields before anything reaches the repository.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from notes_api.models import Note

# Ids are stored as BIGINT
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1

NoteId = Annotated[int, Field(ge=BIGINT_MIN, le=BIGINT_MAX)]


class NoteWrite(BaseModel):
    """Request body for POST /notes and PUT /notes/{id}."""

    title: str = Field(..., min_length=1, description="Note title")
    content: str = Field(..., min_length=1, description="Note content")


class NoteCreate(NoteWrite):
    """Request schema for POST /notes."""

    pass


class NoteUpdate(NoteWrite):
    """
    Request schema for PUT /notes/{id}.

    Full replacement: both fields are required, there is no partial update.
    """

    pass


class NoteListResponse(BaseModel):
    """
    One page of notes.

    The cursor pair is copied from the last item and is omitted for an
    empty page. Feed both values back as ``cursor_created_at`` and
    ``cursor_id`` to fetch the next page.
    """

    items: list[Note]
    next_cursor_created_at: datetime | None = None
    next_cursor_id: int | None = None

    @classmethod
    def from_page(cls, items: list[Note]) -> "NoteListResponse":
        if not items:
            return cls(items=[])
        last = items[-1]
        return cls(
            items=items,
            next_cursor_created_at=last.created_at,
            next_cursor_id=last.id,
        )


class BatchRequest(BaseModel):
    """Request schema for POST /notes/batch."""

    ids: list[NoteId] = Field(default_factory=list)


class BatchResponse(BaseModel):
    """Notes matching a batch request, newest first."""

    items: list[Note]


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str
