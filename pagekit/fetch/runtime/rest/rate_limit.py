"""Minimum-interval rate limiter shared across fetch sessions."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ...core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admits callers one at a time with a minimum gap between admissions.

    Waiters are served in arrival order (asyncio.Lock wakes waiters FIFO), so
    no session sharing the limiter is starved. Independent of retry backoff.
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between two admissions
            clock: Monotonic clock (injectable for tests)
            sleep: Sleep coroutine (injectable for tests)
        """
        if min_interval < 0:
            raise ValueError("min_interval cannot be negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._next_allowed: float | None = None
        self._throttle_until: float | None = None
        self.admitted = 0

    def set_throttle(self, seconds: float) -> None:
        """Hold all admissions for ``seconds`` from now. Never shortens an existing hold."""
        if seconds <= 0:
            return
        until = self._clock() + seconds
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until
            logger.info("rate_limit_throttle", extra={"throttle_seconds": seconds})

    async def acquire(self, cancel_token: CancellationToken | None = None) -> None:
        """Wait for this caller's turn.

        Raises:
            FetchCancelledError: If ``cancel_token`` is cancelled before admission
        """
        if cancel_token is None:
            await self._admit()
        else:
            await cancel_token.guard(self._admit())

    async def _admit(self) -> None:
        async with self._lock:
            now = self._clock()
            wait = 0.0
            if self._next_allowed is not None:
                wait = max(wait, self._next_allowed - now)
            if self._throttle_until is not None:
                wait = max(wait, self._throttle_until - now)
            if wait > 0:
                await self._sleep(wait)
            admitted_at = self._clock()
            if self._throttle_until is not None and admitted_at >= self._throttle_until:
                self._throttle_until = None
            self._next_allowed = admitted_at + self.min_interval
            self.admitted += 1

    async def __aenter__(self) -> RateLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None
