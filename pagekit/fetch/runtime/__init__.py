"""Runtime orchestration components."""

from .paging import MISSING, ConformedPage, MergedResult, PagedFetchEngine, SchemaAccumulator
from .rest import HTTPClient, HttpTransport, RateLimiter
from .retry import RetryingRequestExecutor, RetryPolicy, RetryState, default_backoff

__all__ = [
    "MISSING",
    "ConformedPage",
    "HTTPClient",
    "HttpTransport",
    "MergedResult",
    "PagedFetchEngine",
    "RateLimiter",
    "RetryPolicy",
    "RetryState",
    "RetryingRequestExecutor",
    "SchemaAccumulator",
    "default_backoff",
]
