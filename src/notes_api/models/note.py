"""
Note Entity

Immutable value returned by every repository read path.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class Note(BaseModel):
    """
    A persisted note.

    Attributes:
        id: Server-assigned, monotonically increasing identifier.
        title: Note title.
        content: Note body.
        created_at: Timezone-aware creation timestamp, never modified.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int = Field(ge=1)
    title: str
    content: str
    created_at: AwareDatetime

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """Ordering key; listings are strictly decreasing by this pair."""
        return (self.created_at, self.id)
