"""pagekit.fetch - paginated HTTP fetching with retry, backoff and schema merge."""

from .config import FetchSettings
from .core import (
    CancellationToken,
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
from .models import (
    HttpRequest,
    HttpResponse,
    InitialCursor,
    LinkCursor,
    OffsetCursor,
    PageCursor,
    RawPage,
    TokenCursor,
)
from .runtime import (
    MISSING,
    ConformedPage,
    HTTPClient,
    HttpTransport,
    MergedResult,
    PagedFetchEngine,
    RateLimiter,
    RetryingRequestExecutor,
    RetryPolicy,
    RetryState,
    default_backoff,
)
from .sources import (
    ApiKey,
    BasicAuth,
    BearerToken,
    CredentialProvider,
    GraphQLPageSource,
    LinkPageSource,
    NdjsonOffsetPageSource,
    NdjsonPageSource,
    OffsetPageSource,
    PageSource,
    TokenPageSource,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "PagedFetchEngine",
    "RetryingRequestExecutor",
    "RetryPolicy",
    "RetryState",
    "default_backoff",
    "MISSING",
    "ConformedPage",
    "MergedResult",
    "CancellationToken",
    # Transport
    "HTTPClient",
    "HttpTransport",
    "RateLimiter",
    "FetchSettings",
    # Models
    "HttpRequest",
    "HttpResponse",
    "InitialCursor",
    "LinkCursor",
    "OffsetCursor",
    "PageCursor",
    "RawPage",
    "TokenCursor",
    # Sources
    "PageSource",
    "LinkPageSource",
    "OffsetPageSource",
    "TokenPageSource",
    "GraphQLPageSource",
    "NdjsonPageSource",
    "NdjsonOffsetPageSource",
    "CredentialProvider",
    "BearerToken",
    "ApiKey",
    "BasicAuth",
    # Exceptions
    "FetchError",
    "ConfigurationError",
    "TransportError",
    "RequestFailed",
    "RetryableHttpStatus",
    "NonRetryableHttpStatus",
    "CredentialError",
    "RetryBudgetExhausted",
    "MalformedPageError",
    "FetchCancelledError",
]
