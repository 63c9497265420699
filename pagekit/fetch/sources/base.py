"""Base class for HTTP page producers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.cancellation import CancellationToken
from ..core.exceptions import MalformedPageError
from ..models.cursors import PageCursor
from ..models.http import HttpRequest, HttpResponse
from ..models.page import RawPage
from ..runtime.retry.executors import RetryingRequestExecutor
from ..utils.paths import get_path
from .credentials import CredentialProvider


class PageSource(ABC):
    """Producer that issues one retried HTTP request per page.

    Instances are the ``producer`` argument of PagedFetchEngine: called with
    None for the first page and with the previous page's cursor afterwards.
    A cursor whose ``has_more`` is False ends the fetch (returns None).

    Subclasses decide how a cursor becomes a request and how the next cursor
    is read from a response.
    """

    def __init__(
        self,
        executor: RetryingRequestExecutor,
        request: HttpRequest,
        *,
        records_path: str = "",
        credentials: CredentialProvider | None = None,
        cancel_token: CancellationToken | None = None,
        max_pages: int | None = None,
    ) -> None:
        """Initialize page source.

        Args:
            executor: Retrying executor (owns the transport and retry policy)
            request: Request for the first page
            records_path: Dotted path to the row list in the JSON body ("" = body)
            credentials: Optional provider of auth headers
            cancel_token: Passed to the executor so backoff waits can be cancelled
            max_pages: Stop after this many pages (None = until the API says stop)
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        self._executor = executor
        self._request = request
        self._records_path = records_path
        self._credentials = credentials
        self._cancel_token = cancel_token
        self._max_pages = max_pages
        self._pages_produced = 0

    async def __call__(self, cursor: Optional[PageCursor]) -> Optional[RawPage]:
        if cursor is None:
            self._pages_produced = 0
        elif not cursor.has_more:
            return None
        if self._max_pages is not None and self._pages_produced >= self._max_pages:
            return None

        request = self.build_request(cursor)
        if self._credentials is not None:
            request = request.with_headers(self._credentials.headers())
        response = await self._executor.send(request, cancel_token=self._cancel_token)

        document = self.decode(response)
        rows = self.extract_rows(document, response)
        next_cursor = self.next_cursor(cursor, request, document, response, rows)
        self._pages_produced += 1
        return RawPage(rows=rows, next_cursor=next_cursor)

    @abstractmethod
    def build_request(self, cursor: Optional[PageCursor]) -> HttpRequest:
        """Request for the page addressed by ``cursor`` (None = first page)."""

    @abstractmethod
    def next_cursor(
        self,
        cursor: Optional[PageCursor],
        request: HttpRequest,
        document: Any,
        response: HttpResponse,
        rows: list[dict[str, Any]],
    ) -> PageCursor:
        """Continuation cursor carried by the page just fetched."""

    def decode(self, response: HttpResponse) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedPageError(f"Response body is not JSON: {e}", response=response) from e

    def extract_rows(self, document: Any, response: HttpResponse) -> list[dict[str, Any]]:
        records = get_path(document, self._records_path)
        return self.validate_rows(records, response)

    def validate_rows(self, records: Any, response: HttpResponse) -> list[dict[str, Any]]:
        """Check that ``records`` is a list of JSON objects.

        Raises:
            MalformedPageError: If it is missing, not a list, or holds non-objects
        """
        if records is None:
            raise MalformedPageError(
                f"No records at path {self._records_path!r}", response=response
            )
        if not isinstance(records, list):
            raise MalformedPageError(
                f"Expected a list at path {self._records_path!r}, got {type(records).__name__}",
                response=response,
            )
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise MalformedPageError(
                    f"Record {position} is {type(record).__name__}, expected an object",
                    response=response,
                )
        return records
