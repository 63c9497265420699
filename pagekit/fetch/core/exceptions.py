"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models.http import HttpResponse
    from ..runtime.paging.definitions import MergedResult

_BODY_PREVIEW = 200


class FetchError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(FetchError, ValueError):
    """Invalid policy or settings value."""

    pass


class TransportError(FetchError):
    """Network-level failure before any HTTP status was received.

    Covers DNS failures, connection resets and timeouts. Always retryable,
    subject to the attempt budget.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RequestFailed(FetchError):
    """HTTP response received with a failure status."""

    def __init__(
        self,
        message: str,
        status: int,
        body: bytes = b"",
        response: HttpResponse | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
        self.response = response

    @classmethod
    def from_response(cls, response: HttpResponse) -> RequestFailed:
        preview = response.body[:_BODY_PREVIEW].decode("utf-8", errors="replace")
        message = f"HTTP {response.status} from {response.url or '<unknown>'}"
        if preview:
            message = f"{message}: {preview}"
        return cls(message, status=response.status, body=response.body, response=response)


class RetryableHttpStatus(RequestFailed):
    """Status in the configured retryable set (429, 503, ...)."""

    pass


class NonRetryableHttpStatus(RequestFailed):
    """Any other non-2xx status. Never retried."""

    pass


class CredentialError(NonRetryableHttpStatus):
    """Upstream rejected the supplied credentials (HTTP 401).

    Token refresh is the credential provider's job; the engine only reports it.
    """

    pass


class RetryBudgetExhausted(FetchError):
    """All attempts allowed by the retry policy failed.

    Carries the last response or error so callers can build diagnostics.
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        last_response: HttpResponse | None = None,
        last_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_response = last_response
        self.last_error = last_error

    @property
    def last_status(self) -> int | None:
        if self.last_response is None:
            return None
        return self.last_response.status

    @property
    def last_body(self) -> bytes | None:
        if self.last_response is None:
            return None
        return self.last_response.body


class MalformedPageError(FetchError):
    """Response arrived but could not be parsed into a page. Not retried."""

    def __init__(self, message: str, response: HttpResponse | None = None) -> None:
        super().__init__(message)
        self.response = response


class FetchCancelledError(FetchError):
    """Fetch was cancelled cooperatively.

    Not a data failure. ``partial`` holds whatever was merged before the
    cancellation was observed (None when cancelled outside a fetch loop).
    """

    def __init__(self, message: str = "fetch cancelled", partial: MergedResult | None = None) -> None:
        super().__init__(message)
        self.partial = partial

    @property
    def pages_merged(self) -> int:
        return self.partial.pages_merged if self.partial is not None else 0


def describe(error: BaseException) -> dict[str, Any]:
    """Flatten an error into a dict suitable for structured log ``extra``."""
    info: dict[str, Any] = {"error_type": type(error).__name__, "error_message": str(error)}
    if isinstance(error, RequestFailed):
        info["status"] = error.status
    if isinstance(error, RetryBudgetExhausted):
        info["attempts"] = error.attempts
        info["status"] = error.last_status
    return info
