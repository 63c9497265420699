"""REST runtime abstractions."""

from .http_client import HTTPClient
from .rate_limit import RateLimiter
from .transport import HttpTransport

__all__ = [
    "HTTPClient",
    "HttpTransport",
    "RateLimiter",
]
