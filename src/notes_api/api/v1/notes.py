"""
Notes API Router

REST endpoints for note CRUD, keyset-paginated listing with optional
full-text title search, and batch reads.

Endpoints:
    POST   /notes          - Create a note (201).
    GET    /notes          - List a page of notes, newest first.
    POST   /notes/batch    - Fetch several notes by id in one query.
    GET    /notes/{id}     - Read one note.
    PUT    /notes/{id}     - Replace title and content.
    DELETE /notes/{id}     - Delete a note (204).

Repository errors are translated to responses by the exception handlers
registered in ``notes_api.main``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.core.database import get_db
from notes_api.models import Note
from notes_api.repositories import ListParams, NoteStore
from notes_api.schemas.notes import (
    BIGINT_MAX,
    BIGINT_MIN,
    BatchRequest,
    BatchResponse,
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteUpdate,
)

router = APIRouter()

NotePathId = Annotated[int, Path(ge=BIGINT_MIN, le=BIGINT_MAX)]

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}
_ID_ERRORS = {
    **_ERRORS,
    404: {"model": ErrorResponse, "description": "Note not found"},
}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_repository(request: Request) -> NoteStore:
    """FastAPI dependency - the repository built once at startup."""
    return request.app.state.notes_repository


# ---------------------------------------------------------------------------
# Query parsing
# ---------------------------------------------------------------------------


def _parse_int(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if BIGINT_MIN <= value <= BIGINT_MAX else None


def _parse_timestamp(raw: str | None) -> datetime | None:
    """ISO-8601 timestamp with an explicit offset; anything else is ignored."""
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return value if value.tzinfo is not None else None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
async def create_note(
    note: NoteCreate,
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> Note:
    """Create a note together with its audit entry."""
    return await repo.create(db, note.title, note.content)


@router.get("", response_model=NoteListResponse, response_model_exclude_none=True)
async def list_notes(
    limit: str | None = None,
    cursor_created_at: str | None = None,
    cursor_id: str | None = None,
    q: str = "",
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> NoteListResponse:
    """
    List notes ordered by (created_at, id) descending.

    ``limit`` outside 1..200 falls back to 20. A non-empty ``q`` searches
    titles and ignores the cursor. Unparseable query values are treated as
    absent.
    """
    params = ListParams(
        limit=_parse_int(limit),
        cursor_created_at=_parse_timestamp(cursor_created_at),
        cursor_id=_parse_int(cursor_id),
        query=q,
    )
    items = await repo.list(db, params)
    return NoteListResponse.from_page(items)


@router.post("/batch", response_model=BatchResponse, responses=_ERRORS)
async def batch_get_notes(
    batch: BatchRequest,
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> BatchResponse:
    """Fetch the notes with the given ids; unknown ids are left out."""
    return BatchResponse(items=await repo.batch_get(db, batch.ids))


@router.get("/{note_id}", response_model=Note, responses=_ID_ERRORS)
async def read_note(
    note_id: NotePathId,
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> Note:
    """Retrieve a single note by ID."""
    return await repo.get(db, note_id)


@router.put("/{note_id}", response_model=Note, responses=_ID_ERRORS)
async def update_note(
    note_id: NotePathId,
    note: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> Note:
    """Replace the title and content of an existing note."""
    return await repo.update(db, note_id, note.title, note.content)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ID_ERRORS,
)
async def delete_note(
    note_id: NotePathId,
    db: AsyncSession = Depends(get_db),
    repo: NoteStore = Depends(get_repository),
) -> Response:
    """Delete a note."""
    await repo.delete(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
