"""Page cursor variants.

A cursor carries continuation state from one page fetch to the next. Cursors
are immutable: each page transition produces a new one. Producers create them,
the paging engine only forwards them.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class InitialCursor(BaseModel):
    """No prior page."""

    kind: Literal["initial"] = "initial"

    model_config = ConfigDict(frozen=True)

    @property
    def has_more(self) -> bool:
        return True


class LinkCursor(BaseModel):
    """Next page addressed by an absolute URL (OData ``@odata.nextLink``, ``Link`` header)."""

    kind: Literal["link"] = "link"
    next_url: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_more(self) -> bool:
        return bool(self.next_url)


class OffsetCursor(BaseModel):
    """Next page addressed by row offset."""

    kind: Literal["offset"] = "offset"
    offset: int = Field(..., ge=0)
    page_size: int = Field(..., gt=0)
    more: bool = True

    model_config = ConfigDict(frozen=True)

    @property
    def has_more(self) -> bool:
        return self.more

    def advance(self, rows_received: int, total: int | None = None) -> OffsetCursor:
        """Cursor for the page after one that returned ``rows_received`` rows."""
        offset = self.offset + rows_received
        more = rows_received >= self.page_size
        if total is not None and offset >= total:
            more = False
        return OffsetCursor(offset=offset, page_size=self.page_size, more=more)


class TokenCursor(BaseModel):
    """Next page addressed by an opaque server token."""

    kind: Literal["token"] = "token"
    cursor: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_more(self) -> bool:
        return bool(self.cursor)


PageCursor = Annotated[
    Union[InitialCursor, LinkCursor, OffsetCursor, TokenCursor],
    Field(discriminator="kind"),
]
