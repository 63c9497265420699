"""Schema stabilization across heterogeneous pages.

The first non-empty page fixes the canonical field set. Every page, the first
included, is projected onto it: unknown fields are dropped, absent fields get
the missing marker. Row order and page order are never changed.
"""

from __future__ import annotations

from typing import Any

from ...models.page import RawPage
from .definitions import MISSING, MergedResult


def conform_row(row: dict[str, Any], fields: tuple[str, ...], missing: Any = MISSING) -> dict[str, Any]:
    """Project one row onto ``fields`` (in canonical order)."""
    return {name: row[name] if name in row else missing for name in fields}


class SchemaAccumulator:
    """Growing, schema-stable result set for one fetch."""

    def __init__(self, *, missing: Any = MISSING) -> None:
        """Initialize accumulator.

        Args:
            missing: Filler for canonical fields absent from a page. Pass None
                for plain "fill with null" behaviour.
        """
        self._missing = missing
        self._fields: tuple[str, ...] | None = None
        self._rows: list[dict[str, Any]] = []
        self.pages_merged = 0
        self.dropped_fields: set[str] = set()

    @property
    def fields(self) -> tuple[str, ...] | None:
        return self._fields

    def conform(self, page: RawPage) -> list[dict[str, Any]]:
        """Conform ``page`` to the canonical fields without storing it.

        Sets the canonical fields if this is the first non-empty page, or the
        first page declaring explicit columns.
        """
        if self._fields is None:
            if page.is_empty and page.columns is None:
                return []
            self._fields = page.field_names

        fields = self._fields
        extra = set(page.field_names).difference(fields)
        if extra:
            self.dropped_fields.update(extra)
        return [conform_row(row, fields, self._missing) for row in page.rows]

    def add(self, page: RawPage, *, retain: bool = True) -> list[dict[str, Any]]:
        """Conform ``page`` and count it; append its rows when ``retain`` is set."""
        rows = self.conform(page)
        if retain:
            self._rows.extend(rows)
        self.pages_merged += 1
        return rows

    def result(self, *, producer_calls: int = 0) -> MergedResult:
        return MergedResult(
            fields=self._fields,
            rows=list(self._rows),
            pages_merged=self.pages_merged,
            producer_calls=producer_calls,
        )
