"""Structured logging for paging operations.

This module provides telemetry hooks for fetch-all runs, emitting structured
logs for observability.
"""

from __future__ import annotations

import logging

from ...core.exceptions import describe
from .definitions import MergedResult

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    fetch_id: str,
    page_index: int,
    rows: int,
    cursor_kind: str | None,
    latency_ms: float | None = None,
) -> None:
    """Log one received page.

    Args:
        fetch_id: Identifier of the fetch-all run
        page_index: Zero-based index of the page
        rows: Rows on the page before conforming
        cursor_kind: Kind of the page's continuation cursor
        latency_ms: Producer latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "fetch_id": fetch_id,
            "page_index": page_index,
            "rows": rows,
            "cursor_kind": cursor_kind,
            "latency_ms": latency_ms,
        },
    )


def log_fetch_complete(
    *,
    fetch_id: str,
    result: MergedResult,
    dropped_fields: set[str] | None = None,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a fetch-all run.

    Args:
        fetch_id: Identifier of the fetch-all run
        result: MergedResult from the run
        dropped_fields: Fields seen on later pages but outside the canonical set
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "fetch_complete",
        extra={
            "fetch_id": fetch_id,
            "pages_merged": result.pages_merged,
            "producer_calls": result.producer_calls,
            "total_rows": result.total_rows,
            "canonical_fields": list(result.fields) if result.fields is not None else None,
            "dropped_fields": sorted(dropped_fields) if dropped_fields else [],
            "total_latency_ms": total_latency_ms,
        },
    )


def log_fetch_error(*, fetch_id: str, page_index: int, error: BaseException) -> None:
    """Log a producer failure that aborts the run.

    Args:
        fetch_id: Identifier of the fetch-all run
        page_index: Index of the page whose production failed
        error: The propagated exception
    """
    logger.error(
        "fetch_error",
        extra={"fetch_id": fetch_id, "page_index": page_index, **describe(error)},
    )


def log_fetch_cancelled(*, fetch_id: str, pages_merged: int, reason: str | None) -> None:
    logger.info(
        "fetch_cancelled",
        extra={"fetch_id": fetch_id, "pages_merged": pages_merged, "reason": reason},
    )
