"""
Listing Strategy Selection

Decides how a page of notes is fetched. Pure functions of ``ListParams``:
no I/O, no state.

Priority (exactly one strategy applies):
    1. SEARCH     - non-empty query; any cursor is ignored.
    2. SEEK       - both cursor fields present.
    3. FIRST_PAGE - everything else.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_LIMIT = 20
MAX_LIMIT = 200


def clamp_limit(limit: int | None) -> int:
    """Return ``limit`` if it lies in [1, MAX_LIMIT], else DEFAULT_LIMIT."""
    if limit is None or limit <= 0 or limit > MAX_LIMIT:
        return DEFAULT_LIMIT
    return limit


class ListStrategy(str, Enum):
    SEARCH = "search"
    SEEK = "seek"
    FIRST_PAGE = "first_page"


class ListParams(BaseModel):
    """
    Listing request.

    ``limit`` is clamped on construction. The cursor pair is expected to be
    echoed verbatim from a previously returned note and is not validated
    beyond its types.
    """

    model_config = ConfigDict(frozen=True)

    limit: int | None = DEFAULT_LIMIT
    cursor_created_at: datetime | None = None
    cursor_id: int | None = None
    query: str = ""

    @field_validator("limit")
    @classmethod
    def _clamp(cls, value: int | None) -> int:
        return clamp_limit(value)

    @field_validator("query", mode="before")
    @classmethod
    def _none_to_empty(cls, value: str | None) -> str:
        return value or ""

    @property
    def has_cursor(self) -> bool:
        return self.cursor_created_at is not None and self.cursor_id is not None


def select_strategy(params: ListParams) -> ListStrategy:
    """Pick the listing strategy for ``params``."""
    if params.query:
        return ListStrategy.SEARCH
    if params.has_cursor:
        return ListStrategy.SEEK
    return ListStrategy.FIRST_PAGE
