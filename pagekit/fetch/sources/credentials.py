"""Credential providers consulted once per request.

Token acquisition and refresh belong to the provider; sources only ask for
the headers to attach.
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

TokenSupplier = Union[str, Callable[[], str]]


@runtime_checkable
class CredentialProvider(Protocol):
    def headers(self) -> dict[str, str]:
        ...


def _resolve(value: TokenSupplier) -> str:
    return value() if callable(value) else value


@dataclass(frozen=True)
class BearerToken:
    """``Authorization: Bearer <token>``. ``token`` may be a zero-arg callable."""

    token: TokenSupplier

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {_resolve(self.token)}"}


@dataclass(frozen=True)
class ApiKey:
    """API key in a custom header, optionally with a scheme prefix."""

    key: TokenSupplier
    header_name: str = "X-API-Key"
    prefix: str | None = None

    def headers(self) -> dict[str, str]:
        value = _resolve(self.key)
        if self.prefix:
            value = f"{self.prefix} {value}"
        return {self.header_name: value}


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str

    def headers(self) -> dict[str, str]:
        raw = f"{self.username}:{self.password}".encode()
        return {"Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}"}
