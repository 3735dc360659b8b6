"""
Note Repository

Data access layer for notes: point reads, single-statement update and
delete, transactional create (note + audit entry), keyset/full-text
listing and set-membership batch reads.

Statements are built once per repository and reused by every call.
SQLAlchemy caches their compiled form, and asyncpg keeps a prepared
statement per pooled connection, so nothing is recompiled per request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import (
    BigInteger,
    DateTime,
    Select,
    Text,
    any_,
    bindparam,
    delete,
    insert,
    select,
    tuple_,
    update,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.core.errors import NoteNotFoundError, StorageError
from notes_api.models import (
    Note,
    NoteAuditRecord,
    NoteRecord,
    title_tsquery,
    title_tsvector,
)
from notes_api.repositories.listing import ListParams, ListStrategy, select_strategy
from notes_api.repositories.mapper import row_to_note, rows_to_notes

logger = logging.getLogger(__name__)

AUDIT_CREATE = "create"
CREATE_ISOLATION_LEVEL = "READ COMMITTED"

notes_table = NoteRecord.__table__
audit_table = NoteAuditRecord.__table__

_NOTE_COLUMNS = (
    notes_table.c.id,
    notes_table.c.title,
    notes_table.c.content,
    notes_table.c.created_at,
)
# Global listing order: strictly decreasing (created_at, id)
_NEWEST_FIRST = (notes_table.c.created_at.desc(), notes_table.c.id.desc())


class NoteRepository:
    """
    Repository for Note entities.

    All methods expect an externally managed ``AsyncSession`` (injected
    via FastAPI dependency). The repository itself holds no per-request
    state and is shared by concurrent requests.

    Key guarantees:
        - ``create``: atomic; the note row and its audit row are committed
          together at READ COMMITTED, or neither is.
        - ``update``/``delete``: one statement each, atomic by construction.
          No audit entry is written for either.
        - ``list``/``batch_get``: ordered by (created_at, id) descending.

    Every call runs under a deadline (``timeout`` argument, falling back to
    ``default_timeout``). Expiry aborts the in-flight statement and raises
    ``StorageError``; task cancellation propagates unchanged.
    """

    def __init__(self, default_timeout: float | None = None) -> None:
        self.default_timeout = default_timeout
        self._closed = False

        note_id = bindparam("note_id", type_=BigInteger)

        self._stmt_get = select(*_NOTE_COLUMNS).where(notes_table.c.id == note_id)

        # Bind names must differ from the SET column names
        self._stmt_update = (
            update(notes_table)
            .where(notes_table.c.id == note_id)
            .values(title=bindparam("new_title"), content=bindparam("new_content"))
            .returning(*_NOTE_COLUMNS)
        )
        self._stmt_delete = delete(notes_table).where(notes_table.c.id == note_id)

        self._stmt_insert = (
            insert(notes_table)
            .values(title=bindparam("new_title"), content=bindparam("new_content"))
            .returning(*_NOTE_COLUMNS)
        )
        self._stmt_audit = insert(audit_table).values(
            note_id=bindparam("audit_note_id", type_=BigInteger),
            action=bindparam("audit_action"),
        )

        self._stmt_list: dict[ListStrategy, Select] = self._build_list_statements()

        self._stmt_batch = (
            select(*_NOTE_COLUMNS)
            .where(
                notes_table.c.id == any_(bindparam("ids", type_=ARRAY(BigInteger)))
            )
            .order_by(*_NEWEST_FIRST)
        )

    @staticmethod
    def _build_list_statements() -> dict[ListStrategy, Select]:
        limit = bindparam("limit")
        base = select(*_NOTE_COLUMNS)

        query = bindparam("query", type_=Text)
        search = base.where(title_tsvector().bool_op("@@")(title_tsquery(query)))
        seek = base.where(
            tuple_(notes_table.c.created_at, notes_table.c.id)
            < tuple_(
                bindparam("cursor_created_at", type_=DateTime(timezone=True)),
                bindparam("cursor_id", type_=BigInteger),
            )
        )
        return {
            strategy: stmt.order_by(*_NEWEST_FIRST).limit(limit)
            for strategy, stmt in (
                (ListStrategy.SEARCH, search),
                (ListStrategy.SEEK, seek),
                (ListStrategy.FIRST_PAGE, base),
            )
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the statement handles. Further calls raise StorageError."""
        if self._closed:
            return
        self._closed = True
        logger.info("Note repository closed")

    @property
    def closed(self) -> bool:
        return self._closed

    @asynccontextmanager
    async def _guard(
        self, operation: str, timeout: float | None
    ) -> AsyncIterator[None]:
        """Apply the call deadline and classify failures."""
        if self._closed:
            raise StorageError(operation, "repository is closed")

        deadline = self.default_timeout if timeout is None else timeout
        try:
            async with asyncio.timeout(deadline):
                yield
        except NoteNotFoundError as exc:
            logger.debug("%s: note %d not found", operation, exc.note_id)
            raise
        except StorageError:
            logger.exception("%s failed", operation)
            raise
        except TimeoutError as exc:
            logger.error("%s exceeded its deadline of %ss", operation, deadline)
            raise StorageError(operation, "deadline exceeded") from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("%s failed", operation)
            raise StorageError(operation) from exc

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create(
        self,
        session: AsyncSession,
        title: str,
        content: str,
        *,
        timeout: float | None = None,
    ) -> Note:
        """
        Insert a note and its "create" audit entry in one transaction.

        Title and content are not re-validated here.

        Returns:
            The persisted note with its generated id and created_at.
        """
        async with self._guard("create", timeout):
            async with session.begin():
                await session.connection(
                    execution_options={"isolation_level": CREATE_ISOLATION_LEVEL}
                )
                result = await session.execute(
                    self._stmt_insert, {"new_title": title, "new_content": content}
                )
                note = row_to_note(result.one())
                await session.execute(
                    self._stmt_audit,
                    {"audit_note_id": note.id, "audit_action": AUDIT_CREATE},
                )

        logger.info("Created note %d", note.id)
        return note

    async def update(
        self,
        session: AsyncSession,
        note_id: int,
        title: str,
        content: str,
        *,
        timeout: float | None = None,
    ) -> Note:
        """Replace title and content; the returned row reflects the update."""
        async with self._guard("update", timeout):
            result = await session.execute(
                self._stmt_update,
                {"note_id": note_id, "new_title": title, "new_content": content},
            )
            row = result.one_or_none()
            if row is None:
                await session.rollback()
                raise NoteNotFoundError(note_id)
            note = row_to_note(row)
            await session.commit()

        logger.info("Updated note %d", note_id)
        return note

    async def delete(
        self,
        session: AsyncSession,
        note_id: int,
        *,
        timeout: float | None = None,
    ) -> None:
        """Physically remove a note. Zero affected rows means not found."""
        async with self._guard("delete", timeout):
            result = await session.execute(self._stmt_delete, {"note_id": note_id})
            if result.rowcount == 0:
                await session.rollback()
                raise NoteNotFoundError(note_id)
            await session.commit()

        logger.info("Deleted note %d", note_id)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def get(
        self,
        session: AsyncSession,
        note_id: int,
        *,
        timeout: float | None = None,
    ) -> Note:
        """Look up a note by primary key."""
        async with self._guard("get", timeout):
            result = await session.execute(self._stmt_get, {"note_id": note_id})
            row = result.one_or_none()
            if row is None:
                raise NoteNotFoundError(note_id)
            return row_to_note(row)

    async def list(
        self,
        session: AsyncSession,
        params: ListParams,
        *,
        timeout: float | None = None,
    ) -> list[Note]:
        """
        Fetch one page of notes, newest first.

        A non-empty ``params.query`` selects full-text search over titles
        and drops any cursor. Otherwise a complete cursor pair continues
        after that (created_at, id) position; without one the first page
        is returned. An empty page is an empty list.
        """
        strategy = select_strategy(params)
        bind: dict[str, object] = {"limit": params.limit}
        if strategy is ListStrategy.SEARCH:
            bind["query"] = params.query
        elif strategy is ListStrategy.SEEK:
            bind["cursor_created_at"] = params.cursor_created_at
            bind["cursor_id"] = params.cursor_id

        async with self._guard(f"list[{strategy.value}]", timeout):
            result = await session.execute(self._stmt_list[strategy], bind)
            return rows_to_notes(result.all())

    async def batch_get(
        self,
        session: AsyncSession,
        ids: Sequence[int],
        *,
        timeout: float | None = None,
    ) -> list[Note]:
        """
        Fetch every note whose id is in ``ids`` with a single query.

        Duplicate ids yield one row; unknown ids are simply absent.
        An empty ``ids`` returns ``[]`` without touching the store.
        """
        if not ids:
            return []

        async with self._guard("batch_get", timeout):
            result = await session.execute(self._stmt_batch, {"ids": list(ids)})
            return rows_to_notes(result.all())
