"""Unit tests for RateLimiter."""

from __future__ import annotations

import asyncio

import pytest

from pagekit.fetch.core import CancellationToken, FetchCancelledError
from pagekit.fetch.runtime.rest import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        await asyncio.sleep(0)


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        RateLimiter(-1)


@pytest.mark.asyncio
async def test_first_acquire_is_immediate():
    clock = FakeClock()
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()

    assert clock.sleeps == []
    assert limiter.admitted == 1


@pytest.mark.asyncio
async def test_minimum_gap_enforced():
    clock = FakeClock()
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    clock.now += 0.25
    await limiter.acquire()

    assert clock.sleeps == [pytest.approx(0.75)]


@pytest.mark.asyncio
async def test_no_wait_after_gap_elapsed():
    clock = FakeClock()
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    clock.now += 5
    await limiter.acquire()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_concurrent_sessions_admitted_in_arrival_order():
    """FIFO admission: every waiter gets through, in the order it arrived."""
    clock = FakeClock()
    limiter = RateLimiter(0.5, clock=clock, sleep=clock.sleep)
    order: list[int] = []

    async def session(n: int):
        async with limiter:
            order.append(n)

    await asyncio.gather(*(session(n) for n in range(5)))

    assert order == [0, 1, 2, 3, 4]
    assert limiter.admitted == 5
    assert clock.sleeps == [0.5, 0.5, 0.5, 0.5]


@pytest.mark.asyncio
async def test_throttle_holds_next_admission():
    clock = FakeClock()
    limiter = RateLimiter(0.0, clock=clock, sleep=clock.sleep)

    limiter.set_throttle(3.0)
    limiter.set_throttle(1.0)  # Never shortens
    await limiter.acquire()
    await limiter.acquire()

    assert clock.sleeps == [3.0]


@pytest.mark.asyncio
async def test_cancel_while_waiting_for_admission():
    limiter = RateLimiter(30.0)
    token = CancellationToken()
    await limiter.acquire(token)

    async def cancel_soon():
        await asyncio.sleep(0.01)
        token.cancel("shutdown")

    canceller = asyncio.create_task(cancel_soon())
    with pytest.raises(FetchCancelledError):
        await asyncio.wait_for(limiter.acquire(token), timeout=5)
    await canceller

    assert limiter.admitted == 1
    assert not limiter._lock.locked()


@pytest.mark.asyncio
async def test_cancelled_token_never_admitted():
    clock = FakeClock()
    limiter = RateLimiter(0.0, clock=clock, sleep=clock.sleep)
    token = CancellationToken()
    token.cancel()

    with pytest.raises(FetchCancelledError):
        await limiter.acquire(token)
    assert limiter.admitted == 0
