"""Paged fetch execution.

This module provides the PagedFetchEngine, which drives a page producer until
it signals completion and merges the pages into one schema-stable result.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING, Any, Optional

from ...core.cancellation import CancellationToken
from ...core.exceptions import FetchCancelledError
from ...models.cursors import PageCursor
from .definitions import MISSING, ConformedPage, MergedResult, Producer
from .schema import SchemaAccumulator
from .telemetry import log_fetch_cancelled, log_fetch_complete, log_fetch_error, log_page_fetched

if TYPE_CHECKING:
    from ..rest.rate_limit import RateLimiter


@dataclass
class _FetchRun:
    fetch_id: str
    accumulator: SchemaAccumulator
    producer_calls: int = 0

    def result(self) -> MergedResult:
        return self.accumulator.result(producer_calls=self.producer_calls)


class PagedFetchEngine:
    """Drives a page producer and merges its pages.

    The producer is called with None first, then with each page's
    ``next_cursor``. A None return is the only stop condition: empty pages do
    not stop the loop. Pages are fetched strictly one after another since each
    request depends on the previous page's cursor.

    Producer errors propagate unchanged and discard what was merged so far.
    Cooperative cancellation raises FetchCancelledError carrying the partial
    result in ``partial``.
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        missing: Any = MISSING,
    ) -> None:
        """Initialize the engine.

        Args:
            rate_limiter: Optional limiter acquired before every producer call
                (the enforced inter-page delay)
            missing: Filler for canonical fields absent from a page
        """
        self._rate_limiter = rate_limiter
        self._missing = missing

    async def fetch_all(
        self,
        producer: Producer,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> MergedResult:
        """Fetch every page and return the merged result.

        Args:
            producer: Async callable ``(cursor | None) -> RawPage | None``
            cancel_token: Checked before every producer call

        Returns:
            MergedResult; ``fields`` is None if no non-empty page arrived

        Raises:
            FetchCancelledError: Cancelled; ``partial`` holds the merged pages
            Exception: Whatever the producer raised, unchanged
        """
        run = self._new_run()
        started = perf_counter()
        try:
            async for _ in self._pages(producer, run, cancel_token, retain=True):
                pass
        except FetchCancelledError as e:
            e.partial = run.result()
            log_fetch_cancelled(
                fetch_id=run.fetch_id,
                pages_merged=run.accumulator.pages_merged,
                reason=cancel_token.reason if cancel_token is not None else None,
            )
            raise

        result = run.result()
        log_fetch_complete(
            fetch_id=run.fetch_id,
            result=result,
            dropped_fields=run.accumulator.dropped_fields,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def iter_pages(
        self,
        producer: Producer,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[ConformedPage]:
        """Yield conformed pages as they arrive, without retaining them.

        Same loop, schema rules and error semantics as fetch_all(); memory
        stays bounded by one page.
        """
        run = self._new_run()
        started = perf_counter()
        try:
            async for page in self._pages(producer, run, cancel_token, retain=False):
                yield page
        except FetchCancelledError:
            log_fetch_cancelled(
                fetch_id=run.fetch_id,
                pages_merged=run.accumulator.pages_merged,
                reason=cancel_token.reason if cancel_token is not None else None,
            )
            raise
        log_fetch_complete(
            fetch_id=run.fetch_id,
            result=run.result(),
            dropped_fields=run.accumulator.dropped_fields,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )

    async def stream_rows(
        self,
        producer: Producer,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield conformed rows one at a time, in fetch order."""
        async for page in self.iter_pages(producer, cancel_token=cancel_token):
            for row in page.rows:
                yield row

    def _new_run(self) -> _FetchRun:
        return _FetchRun(
            fetch_id=uuid.uuid4().hex[:12],
            accumulator=SchemaAccumulator(missing=self._missing),
        )

    async def _pages(
        self,
        producer: Producer,
        run: _FetchRun,
        cancel_token: CancellationToken | None,
        *,
        retain: bool,
    ) -> AsyncIterator[ConformedPage]:
        cursor: Optional[PageCursor] = None
        index = 0
        while True:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire(cancel_token)

            page_start = perf_counter()
            run.producer_calls += 1
            try:
                page = await producer(cursor)
            except FetchCancelledError:
                raise
            except Exception as e:
                log_fetch_error(fetch_id=run.fetch_id, page_index=index, error=e)
                raise

            if page is None:
                return

            log_page_fetched(
                fetch_id=run.fetch_id,
                page_index=index,
                rows=len(page.rows),
                cursor_kind=page.next_cursor.kind,
                latency_ms=(perf_counter() - page_start) * 1000.0,
            )
            rows = run.accumulator.add(page, retain=retain)
            yield ConformedPage(
                index=index,
                fields=run.accumulator.fields,
                rows=rows,
                next_cursor=page.next_cursor,
            )
            cursor = page.next_cursor
            index += 1
