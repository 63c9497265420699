"""Opaque continuation-token pagination."""

from __future__ import annotations

from typing import Any, Optional

from ..models.cursors import PageCursor, TokenCursor
from ..models.http import HttpRequest, HttpResponse
from ..utils.paths import get_path
from .base import PageSource


class TokenPageSource(PageSource):
    """Sends back the token the previous response returned at ``cursor_path``."""

    def __init__(
        self,
        *args: Any,
        cursor_path: str = "next_cursor",
        cursor_param: str = "cursor",
        token_in_body: bool = False,
        **kwargs: Any,
    ) -> None:
        """Initialize token source.

        Args:
            cursor_path: Dotted path of the next token in the JSON body
            cursor_param: Query parameter (or body field) carrying the token
            token_in_body: Merge the token into the JSON body instead of the query
        """
        super().__init__(*args, **kwargs)
        self._cursor_path = cursor_path
        self._cursor_param = cursor_param
        self._token_in_body = token_in_body

    def build_request(self, cursor: Optional[PageCursor]) -> HttpRequest:
        if not isinstance(cursor, TokenCursor) or not cursor.cursor:
            return self._request
        if self._token_in_body:
            body = dict(self._request.json_body or {})
            body[self._cursor_param] = cursor.cursor
            return self._request.model_copy(update={"json_body": body})
        return self._request.with_params(**{self._cursor_param: cursor.cursor})

    def next_cursor(
        self,
        cursor: Optional[PageCursor],
        request: HttpRequest,
        document: Any,
        response: HttpResponse,
        rows: list[dict[str, Any]],
    ) -> PageCursor:
        token = get_path(document, self._cursor_path)
        return TokenCursor(cursor=str(token) if token else None)
