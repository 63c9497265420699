"""Generic paged fetching with schema stabilization.

Architecture:
    The paging layer consists of:
    - definitions.py: MISSING marker, Producer type, ConformedPage, MergedResult
    - schema.py: Canonical-field accumulator (first non-empty page wins)
    - executors.py: PagedFetchEngine (producer loop, cancellation, streaming)
    - telemetry.py: Structured logging

Usage:
    A producer is any async callable taking the previous page's cursor (None
    on the first call) and returning a RawPage, or None when there are no
    more pages. Ready-made producers live in ``pagekit.fetch.sources``.
"""

from __future__ import annotations

from .definitions import MISSING, ConformedPage, MergedResult, Producer
from .executors import PagedFetchEngine
from .schema import SchemaAccumulator, conform_row

__all__ = [
    "MISSING",
    "ConformedPage",
    "MergedResult",
    "PagedFetchEngine",
    "Producer",
    "SchemaAccumulator",
    "conform_row",
]
