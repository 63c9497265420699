"""Structured logging for retry decisions."""

from __future__ import annotations

import logging

from .definitions import RetryState

logger = logging.getLogger(__name__)


def log_retry_scheduled(*, state: RetryState, max_attempts: int, url: str | None = None) -> None:
    """Log a failed attempt that will be retried after ``state.next_delay``."""
    logger.warning(
        "retry_scheduled",
        extra={
            **state.as_log_fields(),
            "max_attempts": max_attempts,
            "url": url,
        },
    )


def log_retry_exhausted(*, state: RetryState, max_attempts: int, url: str | None = None) -> None:
    logger.error(
        "retry_exhausted",
        extra={
            **state.as_log_fields(),
            "max_attempts": max_attempts,
            "url": url,
        },
    )


def log_request_failed(*, status: int, attempt: int, url: str | None = None) -> None:
    """Log a non-retryable status. The caller raises right after."""
    logger.error(
        "request_failed",
        extra={"status": status, "attempt": attempt, "url": url},
    )
