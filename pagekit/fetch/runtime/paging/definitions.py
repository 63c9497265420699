"""Paging definitions: the missing-field marker, producer type and merged result."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Optional

from ...models.cursors import PageCursor
from ...models.page import RawPage


class _Missing:
    """Marker for a canonical field absent from a page.

    Distinct from None, which means the field was present with a JSON null.
    """

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

Producer = Callable[[Optional[PageCursor]], Awaitable[Optional[RawPage]]]


@dataclass(frozen=True)
class ConformedPage:
    """One page after schema conformance, as yielded by streaming fetches.

    Attributes:
        index: Zero-based page index in fetch order
        fields: Canonical fields at this point (None until a non-empty page arrives)
        rows: Conformed rows of this page
        next_cursor: Continuation cursor the page carried
    """

    index: int
    fields: tuple[str, ...] | None
    rows: list[dict[str, Any]]
    next_cursor: PageCursor


@dataclass
class MergedResult:
    """Result of a fetch-all run.

    Attributes:
        fields: Canonical field set, or None if no non-empty page was seen
        rows: Conformed rows in fetch order
        pages_merged: Number of non-null pages received
        producer_calls: Number of producer invocations, including the final None
    """

    fields: tuple[str, ...] | None = None
    rows: list[dict[str, Any]] = field(default_factory=list)
    pages_merged: int = 0
    producer_calls: int = 0

    @property
    def has_schema(self) -> bool:
        """False for a schemaless empty result (canonical fields never set)."""
        return self.fields is not None

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.rows)

    def column(self, name: str) -> list[Any]:
        """Values of one canonical field across all rows.

        Raises:
            KeyError: If ``name`` is not a canonical field
        """
        if self.fields is None or name not in self.fields:
            raise KeyError(name)
        return [row[name] for row in self.rows]
