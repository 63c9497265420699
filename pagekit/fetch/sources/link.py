"""Next-link pagination (OData ``@odata.nextLink``, HAL ``next``, ``Link`` header)."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urljoin

from ..models.cursors import LinkCursor, PageCursor
from ..models.http import HttpRequest, HttpResponse
from ..utils.http import parse_link_header
from ..utils.paths import get_path
from .base import PageSource


class LinkPageSource(PageSource):
    """Follows an absolute next-page URL until the API stops sending one.

    The next URL already carries its query string, so the first request's
    params are dropped on follow-up pages. Headers and body are kept.
    """

    def __init__(
        self,
        *args: Any,
        next_link_path: str = "@odata.nextLink",
        use_link_header: bool = False,
        link_rel: str = "next",
        **kwargs: Any,
    ) -> None:
        """Initialize link source.

        Args:
            next_link_path: Dotted path of the next URL in the JSON body
            use_link_header: Read the next URL from the ``Link`` header instead
            link_rel: Relation name to follow in the ``Link`` header
        """
        super().__init__(*args, **kwargs)
        self._next_link_path = next_link_path
        self._use_link_header = use_link_header
        self._link_rel = link_rel.lower()

    def build_request(self, cursor: Optional[PageCursor]) -> HttpRequest:
        if isinstance(cursor, LinkCursor) and cursor.next_url:
            return self._request.model_copy(update={"url": cursor.next_url, "params": {}})
        return self._request

    def next_cursor(
        self,
        cursor: Optional[PageCursor],
        request: HttpRequest,
        document: Any,
        response: HttpResponse,
        rows: list[dict[str, Any]],
    ) -> PageCursor:
        if self._use_link_header:
            link = parse_link_header(response.header("Link")).get(self._link_rel)
        else:
            link = get_path(document, self._next_link_path)
        if not link or not isinstance(link, str):
            return LinkCursor(next_url=None)
        return LinkCursor(next_url=urljoin(response.url or request.url, link))
