"""
Note Store Interface

Structural type for the six note operations. The HTTP layer depends on
this protocol rather than on ``NoteRepository`` so it can be exercised
with a stub store in unit tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.models import Note
from notes_api.repositories.listing import ListParams


class NoteStore(Protocol):
    """
    Data access for notes.

    All methods take an externally managed session (injected via FastAPI
    dependency) and an optional per-call timeout in seconds.

    Raises:
        NoteNotFoundError: get/update/delete matched no row.
        StorageError: any other failure of the underlying store.
    """

    async def create(
        self,
        session: AsyncSession,
        title: str,
        content: str,
        *,
        timeout: float | None = None,
    ) -> Note: ...

    async def get(
        self,
        session: AsyncSession,
        note_id: int,
        *,
        timeout: float | None = None,
    ) -> Note: ...

    async def update(
        self,
        session: AsyncSession,
        note_id: int,
        title: str,
        content: str,
        *,
        timeout: float | None = None,
    ) -> Note: ...

    async def delete(
        self,
        session: AsyncSession,
        note_id: int,
        *,
        timeout: float | None = None,
    ) -> None: ...

    async def list(
        self,
        session: AsyncSession,
        params: ListParams,
        *,
        timeout: float | None = None,
    ) -> list[Note]: ...

    async def batch_get(
        self,
        session: AsyncSession,
        ids: Sequence[int],
        *,
        timeout: float | None = None,
    ) -> list[Note]: ...
