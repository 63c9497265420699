"""Offset/limit pagination."""

from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import MalformedPageError
from ..models.cursors import OffsetCursor, PageCursor
from ..models.http import HttpRequest, HttpResponse
from ..utils.paths import get_path
from .base import PageSource


class OffsetPageSource(PageSource):
    """Requests ``limit`` rows at increasing offsets.

    Stops after a short page, or once ``total_path`` reports the end.
    """

    def __init__(
        self,
        *args: Any,
        page_size: int = 100,
        offset_param: str = "offset",
        limit_param: str = "limit",
        start_offset: int = 0,
        total_path: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._page_size = page_size
        self._offset_param = offset_param
        self._limit_param = limit_param
        self._start_offset = start_offset
        self._total_path = total_path

    def _current(self, cursor: Optional[PageCursor]) -> OffsetCursor:
        if isinstance(cursor, OffsetCursor):
            return cursor
        return OffsetCursor(offset=self._start_offset, page_size=self._page_size)

    def build_request(self, cursor: Optional[PageCursor]) -> HttpRequest:
        current = self._current(cursor)
        return self._request.with_params(
            **{self._offset_param: current.offset, self._limit_param: current.page_size}
        )

    def next_cursor(
        self,
        cursor: Optional[PageCursor],
        request: HttpRequest,
        document: Any,
        response: HttpResponse,
        rows: list[dict[str, Any]],
    ) -> PageCursor:
        total = None
        if self._total_path:
            raw_total = get_path(document, self._total_path)
            if raw_total is not None:
                try:
                    total = int(raw_total)
                except (TypeError, ValueError) as e:
                    raise MalformedPageError(
                        f"Total at {self._total_path!r} is not an integer: {raw_total!r}",
                        response=response,
                    ) from e
        return self._current(cursor).advance(len(rows), total)
