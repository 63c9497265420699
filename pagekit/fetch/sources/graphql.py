"""GraphQL connection (Relay cursor) pagination."""

from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import MalformedPageError
from ..models.cursors import PageCursor, TokenCursor
from ..models.http import HttpRequest, HttpResponse
from ..runtime.retry.executors import RetryingRequestExecutor
from ..utils.paths import get_path
from .base import PageSource


class GraphQLPageSource(PageSource):
    """Walks a connection's ``pageInfo.endCursor`` until ``hasNextPage`` is false.

    The query must declare the page-size and cursor variables, for example::

        query($first: Int!, $after: String) {
          repository(owner: "o", name: "r") {
            issues(first: $first, after: $after) {
              nodes { number title }
              pageInfo { hasNextPage endCursor }
            }
          }
        }
    """

    def __init__(
        self,
        executor: RetryingRequestExecutor,
        url: str,
        query: str,
        *,
        connection_path: str,
        variables: dict[str, Any] | None = None,
        page_size: int = 100,
        page_size_variable: str = "first",
        cursor_variable: str = "after",
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize GraphQL source.

        Args:
            executor: Retrying executor
            url: GraphQL endpoint
            query: Query text declaring the page-size and cursor variables
            connection_path: Dotted path of the connection object, e.g. ``data.repository.issues``
            variables: Extra query variables
        """
        request = HttpRequest(method="POST", url=url, headers=headers or {})
        super().__init__(executor, request, records_path=connection_path, **kwargs)
        self._query = query
        self._variables = dict(variables or {})
        self._page_size = page_size
        self._page_size_variable = page_size_variable
        self._cursor_variable = cursor_variable
        self._connection_path = connection_path

    def build_request(self, cursor: Optional[PageCursor]) -> HttpRequest:
        variables = {**self._variables, self._page_size_variable: self._page_size}
        if isinstance(cursor, TokenCursor) and cursor.cursor:
            variables[self._cursor_variable] = cursor.cursor
        else:
            variables[self._cursor_variable] = None
        return self._request.model_copy(
            update={"json_body": {"query": self._query, "variables": variables}}
        )

    def decode(self, response: HttpResponse) -> Any:
        document = super().decode(response)
        errors = document.get("errors") if isinstance(document, dict) else None
        if errors:
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise MalformedPageError(
                f"GraphQL returned {len(errors)} error(s): {message}", response=response
            )
        return document

    def extract_rows(self, document: Any, response: HttpResponse) -> list[dict[str, Any]]:
        connection = self._connection(document, response)
        if "edges" in connection:
            edges = connection["edges"] or []
            records = [edge.get("node") if isinstance(edge, dict) else edge for edge in edges]
        else:
            records = connection.get("nodes")
        return self.validate_rows(records, response)

    def next_cursor(
        self,
        cursor: Optional[PageCursor],
        request: HttpRequest,
        document: Any,
        response: HttpResponse,
        rows: list[dict[str, Any]],
    ) -> PageCursor:
        page_info = self._connection(document, response).get("pageInfo") or {}
        if not page_info.get("hasNextPage"):
            return TokenCursor(cursor=None)
        end_cursor = page_info.get("endCursor")
        if not end_cursor or not isinstance(end_cursor, str):
            raise MalformedPageError(
                "pageInfo.hasNextPage is true but endCursor is missing", response=response
            )
        return TokenCursor(cursor=end_cursor)

    def _connection(self, document: Any, response: HttpResponse) -> dict[str, Any]:
        connection = get_path(document, self._connection_path)
        if not isinstance(connection, dict):
            raise MalformedPageError(
                f"No connection object at {self._connection_path!r}", response=response
            )
        return connection
