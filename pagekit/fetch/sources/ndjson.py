"""Newline-delimited JSON bodies.

NDJSON responses have no envelope, so the continuation has to come from
outside the body: a ``Link`` header or the row count (offset paging).
"""

from __future__ import annotations

import json
from typing import Any

from ..core.exceptions import MalformedPageError
from ..models.http import HttpResponse
from .link import LinkPageSource
from .offset import OffsetPageSource


class NdjsonMixin:
    """Decodes the body as one JSON object per line. Blank lines are skipped."""

    def decode(self, response: HttpResponse) -> Any:
        try:
            return list(response.iter_ndjson())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedPageError(f"Invalid NDJSON line: {e}", response=response) from e

    def extract_rows(self, document: Any, response: HttpResponse) -> list[dict[str, Any]]:
        return self.validate_rows(document, response)  # type: ignore[attr-defined]


class NdjsonPageSource(NdjsonMixin, LinkPageSource):
    """NDJSON pages chained through the ``Link: <...>; rel="next"`` header."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("use_link_header", True)
        super().__init__(*args, **kwargs)


class NdjsonOffsetPageSource(NdjsonMixin, OffsetPageSource):
    """NDJSON pages addressed by offset/limit."""

    pass
