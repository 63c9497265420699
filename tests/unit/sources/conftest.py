"""Shared fixtures for page source tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from pagekit.fetch.models import HttpRequest, HttpResponse
from pagekit.fetch.runtime.retry import RetryingRequestExecutor, RetryPolicy


class ScriptedTransport:
    """Transport returning queued responses and recording every request."""

    def __init__(self) -> None:
        self.responses: list[HttpResponse] = []
        self.requests: list[HttpRequest] = []

    def queue(self, body: Any = None, *, status: int = 200, headers=None, raw: bytes | None = None, url=None):
        if raw is None:
            raw = json.dumps(body).encode()
        self.responses.append(HttpResponse(status=status, headers=headers or {}, body=raw, url=url))
        return self

    async def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")
        return self.responses.pop(0)


async def _no_sleep(delay: float) -> None:
    return None


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def executor(transport) -> RetryingRequestExecutor:
    return RetryingRequestExecutor(transport, RetryPolicy(max_attempts=3), sleep=_no_sleep)
