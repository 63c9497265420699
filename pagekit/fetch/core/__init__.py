"""Core components."""

from .cancellation import CancellationToken
from .exceptions import (
    ConfigurationError,
    CredentialError,
    FetchCancelledError,
    FetchError,
    MalformedPageError,
    NonRetryableHttpStatus,
    RequestFailed,
    RetryableHttpStatus,
    RetryBudgetExhausted,
    TransportError,
)

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "CredentialError",
    "FetchCancelledError",
    "FetchError",
    "MalformedPageError",
    "NonRetryableHttpStatus",
    "RequestFailed",
    "RetryBudgetExhausted",
    "RetryableHttpStatus",
    "TransportError",
]
