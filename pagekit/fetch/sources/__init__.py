"""Ready-made page producers for common REST pagination schemes.

Each source is an async callable usable directly as the producer of
PagedFetchEngine. Every page is one request through a
RetryingRequestExecutor, so transient failures are retried per page.
"""

from .base import PageSource
from .credentials import ApiKey, BasicAuth, BearerToken, CredentialProvider
from .graphql import GraphQLPageSource
from .link import LinkPageSource
from .ndjson import NdjsonMixin, NdjsonOffsetPageSource, NdjsonPageSource
from .offset import OffsetPageSource
from .token import TokenPageSource

__all__ = [
    "ApiKey",
    "BasicAuth",
    "BearerToken",
    "CredentialProvider",
    "GraphQLPageSource",
    "LinkPageSource",
    "NdjsonMixin",
    "NdjsonOffsetPageSource",
    "NdjsonPageSource",
    "OffsetPageSource",
    "PageSource",
    "TokenPageSource",
]
