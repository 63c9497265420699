"""Transport boundary used by the retry executor and page sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...models.http import HttpRequest, HttpResponse


@runtime_checkable
class HttpTransport(Protocol):
    """Anything that can execute an HttpRequest in manual status handling mode.

    Implementations must return non-2xx responses as ordinary HttpResponse
    values (the retry executor classifies them) and raise TransportError only
    when no status was received at all.
    """

    async def request(self, request: HttpRequest) -> HttpResponse:
        ...
