"""Cooperative cancellation for fetch sessions.

The paging loop checks the token before each producer call and the retry
executor waits on it during backoff, so a cancelled fetch never issues another
request. An in-flight HTTP call is left to finish (or to its own timeout).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from .exceptions import FetchCancelledError

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared between a caller and a fetch."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Repeated calls keep the first reason."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise FetchCancelledError(self._message())

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, waking early if cancelled.

        Raises:
            FetchCancelledError: If the token is (or becomes) cancelled
        """
        self.raise_if_cancelled()
        if delay <= 0:
            # Still yield to the loop so a zero backoff is a real suspension point
            await asyncio.sleep(0)
            self.raise_if_cancelled()
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        raise FetchCancelledError(self._message())

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable``, abandoning it if the token is cancelled first.

        Raises:
            FetchCancelledError: If the token is (or becomes) cancelled
        """
        if self._event.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise FetchCancelledError(self._message())
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if not task.done():
            task.cancel()
            # Let the abandoned task unwind (e.g. release a lock) before raising
            await asyncio.gather(task, return_exceptions=True)
            raise FetchCancelledError(self._message())
        result = task.result()
        self.raise_if_cancelled()
        return result

    def _message(self) -> str:
        if self._reason:
            return f"fetch cancelled: {self._reason}"
        return "fetch cancelled"
