"""Environment-driven configuration.

Environment variables (prefix ``PAGEKIT_``):
    PAGEKIT_MAX_ATTEMPTS: Attempts per logical request, first one included
    PAGEKIT_RETRYABLE_STATUS_CODES: JSON list, e.g. ``[429, 503]``
    PAGEKIT_RESPECT_RETRY_AFTER: Honour the server's Retry-After header
    PAGEKIT_MAX_DELAY: Cap on a single backoff delay in seconds
    PAGEKIT_REQUEST_TIMEOUT: Per-call timeout in seconds
    PAGEKIT_MIN_REQUEST_INTERVAL: Minimum seconds between requests (0 disables)
    PAGEKIT_USER_AGENT: User-Agent header sent by HTTPClient
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .runtime.rest.rate_limit import RateLimiter
from .runtime.retry.definitions import DEFAULT_RETRYABLE_STATUS_CODES, RetryPolicy


class FetchSettings(BaseSettings):
    """Settings for the retry executor, HTTP client and rate limiter.

    Example:
        >>> settings = FetchSettings(max_attempts=3)
        >>> policy = settings.retry_policy()
        >>> policy.max_attempts
        3
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_attempts: int = Field(default=5, ge=1, le=20)
    retryable_status_codes: list[int] = Field(
        default_factory=lambda: sorted(DEFAULT_RETRYABLE_STATUS_CODES)
    )
    respect_retry_after: bool = False
    max_delay: Optional[float] = Field(default=None, ge=0)
    request_timeout: float = Field(default=30.0, gt=0)
    min_request_interval: float = Field(default=0.0, ge=0)
    user_agent: Optional[str] = "pagekit-fetch"

    @field_validator("retryable_status_codes")
    @classmethod
    def validate_status_codes(cls, v: list[int]) -> list[int]:
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"not an HTTP status code: {code}")
        return v

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            retryable_status_codes=frozenset(self.retryable_status_codes),
            max_delay=self.max_delay,
            respect_retry_after=self.respect_retry_after,
        )

    def rate_limiter(self) -> Optional[RateLimiter]:
        """Shared limiter, or None when no minimum interval is configured."""
        if self.min_request_interval <= 0:
            return None
        return RateLimiter(self.min_request_interval)
