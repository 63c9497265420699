"""Data models for the fetch engine.

All models are Pydantic v2 and frozen: requests can be replayed by the retry
executor, and cursors are replaced rather than mutated between pages.
"""

from .cursors import InitialCursor, LinkCursor, OffsetCursor, PageCursor, TokenCursor
from .http import HttpRequest, HttpResponse
from .page import RawPage

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "InitialCursor",
    "LinkCursor",
    "OffsetCursor",
    "PageCursor",
    "RawPage",
    "TokenCursor",
]
