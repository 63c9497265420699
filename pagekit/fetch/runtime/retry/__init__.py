"""Retry layer for single HTTP operations.

Architecture:
    - definitions.py: RetryPolicy, RetryState, default_backoff
    - executors.py: RetryingRequestExecutor (attempt loop and classification)
    - telemetry.py: Structured logging of retry decisions
"""

from __future__ import annotations

from .definitions import (
    DEFAULT_RETRYABLE_STATUS_CODES,
    RetryPolicy,
    RetryState,
    default_backoff,
    parse_retry_after,
)
from .executors import RetryingRequestExecutor

__all__ = [
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "RetryPolicy",
    "RetryState",
    "RetryingRequestExecutor",
    "default_backoff",
    "parse_retry_after",
]
