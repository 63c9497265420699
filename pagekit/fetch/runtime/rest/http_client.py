"""aiohttp transport with manual status handling."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional, Union

import aiohttp

from ...core.exceptions import TransportError
from ...models.http import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from ...config import FetchSettings

logger = logging.getLogger(__name__)

ResponseHook = Callable[[HttpResponse], Union[Optional[float], Awaitable[Optional[float]]]]


def _encode_params(params: dict[str, Any]) -> dict[str, str]:
    """aiohttp only accepts str/int/float query values."""
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


class HTTPClient:
    """Async HTTP client wrapper.

    Every status comes back as an HttpResponse; nothing here raises for
    4xx/5xx. Only failures where no status arrived (DNS, reset, timeout) raise
    TransportError. Response hooks may return a delay in seconds, which holds
    the next request (server-driven throttling).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.default_headers = dict(headers or {})
        self._session: Optional[aiohttp.ClientSession] = None
        self._response_hooks: list[ResponseHook] = []
        self._throttle_until: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: FetchSettings, base_url: Optional[str] = None) -> HTTPClient:
        headers = {"User-Agent": settings.user_agent} if settings.user_agent else None
        return cls(base_url=base_url, timeout=settings.request_timeout, headers=headers)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._response_hooks.append(hook)

    def set_throttle(self, seconds: float) -> None:
        """Delay the next request by ``seconds``. Extends, never shortens."""
        if seconds <= 0:
            return
        until = time.monotonic() + seconds
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until

    def resolve_url(self, url: str) -> str:
        if self.base_url and not url.startswith(("http://", "https://")):
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    async def request(self, request: HttpRequest) -> HttpResponse:
        """Execute ``request`` and return whatever status the server sent."""
        await self._wait_for_throttle()

        url = self.resolve_url(request.url)
        kwargs: dict[str, Any] = {
            "params": _encode_params(request.params) or None,
            "headers": {**self.default_headers, **request.headers} or None,
        }
        if request.json_body is not None:
            kwargs["json"] = request.json_body
        if request.data is not None:
            kwargs["data"] = request.data
        if request.timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=request.timeout)

        try:
            async with self.session.request(request.method.upper(), url, **kwargs) as resp:
                body = await resp.read()
                response = HttpResponse(
                    status=resp.status,
                    headers={k: v for k, v in resp.headers.items()},
                    body=body,
                    url=str(resp.url),
                )
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timed out calling {url}", cause=e) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__} calling {url}: {e}", cause=e) from e

        await self._run_hooks(response)
        return response

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        """GET request."""
        return await self.request(
            HttpRequest(method="GET", url=url, params=params or {}, headers=headers or {})
        )

    async def post(
        self,
        url: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        """POST request with a JSON body."""
        return await self.request(
            HttpRequest(
                method="POST",
                url=url,
                json_body=json,
                params=params or {},
                headers=headers or {},
            )
        )

    async def _wait_for_throttle(self) -> None:
        # A hook may extend the hold while we sleep, so re-read it each turn
        while self._throttle_until is not None:
            remaining = self._throttle_until - time.monotonic()
            if remaining <= 0:
                self._throttle_until = None
                return
            await asyncio.sleep(remaining)

    async def _run_hooks(self, response: HttpResponse) -> None:
        for hook in self._response_hooks:
            try:
                result = hook(response)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                # Hook failures are logged, never raised
                logger.warning("response_hook_error", extra={"error_message": str(e)})
                continue
            if result:
                self.set_throttle(float(result))

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
