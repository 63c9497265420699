"""Retry policy and state definitions.

This module defines the immutable configuration that drives the retrying
request executor, the per-request retry state, and the default backoff curve.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from ...core.exceptions import ConfigurationError
from ...models.http import HttpResponse

# 509 is "bandwidth limit exceeded" on several hosted APIs
DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504, 509})


def default_backoff(attempt: int) -> float:
    """Exponential backoff with jitter, in whole seconds.

    ``delay(0) = 0``; for ``attempt >= 1`` the delay is
    ``floor(2**attempt + 1 + uniform(-2**attempt / 2, 2**attempt / 2))``.
    The jitter keeps concurrent callers from retrying in lockstep.

    Args:
        attempt: Zero-based index of the attempt that just failed

    Returns:
        Delay in seconds before the next attempt
    """
    if attempt <= 0:
        return 0
    base = 2**attempt
    return math.floor(base + 1 + random.uniform(-base / 2, base / 2))


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Parse a ``Retry-After`` header (delta-seconds or HTTP date).

    Returns:
        Seconds to wait, or None if absent or unparseable
    """
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for one logical request.

    Attributes:
        max_attempts: Total attempts allowed, including the first (>= 1)
        retryable_status_codes: Statuses treated as transient
        backoff: Maps the failed attempt's zero-based index to a delay in seconds
        max_delay: Optional cap applied to every computed delay
        respect_retry_after: Wait at least the server's ``Retry-After`` when present
        max_retry_after: Upper bound on a server-requested wait

    Examples:
        # Defaults: 5 attempts, jittered exponential backoff
        RetryPolicy()

        # Only throttling responses, fixed one second pause
        RetryPolicy(max_attempts=3, retryable_status_codes=frozenset({429}),
                    backoff=lambda attempt: 1.0)
    """

    max_attempts: int = 5
    retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES
    backoff: Callable[[int], float] = field(default=default_backoff, compare=False)
    max_delay: float | None = None
    respect_retry_after: bool = False
    max_retry_after: float = 300.0

    def __post_init__(self) -> None:
        """Validate retry policy configuration."""
        if self.max_attempts < 1:
            raise ConfigurationError("RetryPolicy.max_attempts must be >= 1")
        if self.max_delay is not None and self.max_delay < 0:
            raise ConfigurationError("RetryPolicy.max_delay cannot be negative")
        if not isinstance(self.retryable_status_codes, frozenset):
            object.__setattr__(self, "retryable_status_codes", frozenset(self.retryable_status_codes))

    def is_retryable(self, status: int) -> bool:
        return status in self.retryable_status_codes

    def delay_for(self, attempt: int, response: HttpResponse | None = None) -> float:
        """Delay to wait after the given zero-based attempt failed."""
        delay = float(self.backoff(attempt))
        if self.respect_retry_after and response is not None:
            retry_after = parse_retry_after(response.header("Retry-After"))
            if retry_after is not None:
                delay = max(delay, min(retry_after, self.max_retry_after))
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return max(0.0, delay)


@dataclass(frozen=True)
class RetryState:
    """Progress of one logical request through its retry budget.

    Replaced, never mutated, after each failed attempt.
    """

    attempt_number: int = 0
    last_error: BaseException | None = None
    last_response: HttpResponse | None = None
    next_delay: float = 0.0

    def after_failure(
        self,
        *,
        error: BaseException,
        response: HttpResponse | None,
        next_delay: float = 0.0,
    ) -> RetryState:
        return replace(
            self,
            attempt_number=self.attempt_number + 1,
            last_error=error,
            last_response=response,
            next_delay=next_delay,
        )

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt_number,
            "status": self.last_response.status if self.last_response is not None else None,
            "error_type": type(self.last_error).__name__ if self.last_error else None,
            "next_delay": self.next_delay,
        }
