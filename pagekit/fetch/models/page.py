"""Raw page model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .cursors import PageCursor


class RawPage(BaseModel):
    """One fetched slice of a larger dataset plus its continuation cursor.

    ``next_cursor`` is what the engine hands to the producer on the next call.
    A page on the last slice still carries a cursor, one whose ``has_more`` is
    False; the producer turns that into the terminating ``None``.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)
    next_cursor: PageCursor
    columns: tuple[str, ...] | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        """Reject duplicate column names."""
        if v is not None and len(set(v)) != len(v):
            raise ValueError("columns must not contain duplicates")
        return v

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def field_names(self) -> tuple[str, ...]:
        """Explicit columns, else row keys in first-appearance order."""
        if self.columns is not None:
            return self.columns
        seen: dict[str, None] = {}
        for row in self.rows:
            for key in row:
                seen.setdefault(key, None)
        return tuple(seen)
