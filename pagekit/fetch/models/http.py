"""HTTP request/response value models."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HttpRequest(BaseModel):
    """Description of one HTTP call. Safe to replay for retries."""

    method: str = "GET"
    url: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    json_body: Any = None
    data: bytes | None = None
    timeout: float | None = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def with_params(self, **params: Any) -> HttpRequest:
        """Copy with extra query parameters merged in (None removes a key)."""
        merged = dict(self.params)
        for key, value in params.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return self.model_copy(update={"params": merged})

    def with_headers(self, headers: dict[str, str]) -> HttpRequest:
        if not headers:
            return self
        return self.model_copy(update={"headers": {**self.headers, **headers}})


class HttpResponse(BaseModel):
    """Response returned by a transport in manual status handling mode."""

    status: int = Field(..., ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    url: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode(self._charset(), errors="replace")

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.body.decode(self._charset()))

    def iter_ndjson(self) -> Iterator[Any]:
        """Yield one decoded value per non-blank line."""
        for line in self.text.splitlines():
            line = line.strip()
            if line:
                yield json.loads(line)

    def _charset(self) -> str:
        content_type = self.header("Content-Type") or ""
        for part in content_type.split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "charset" and value:
                charset = value.strip('"')
                try:
                    b"".decode(charset)
                except LookupError:
                    # Unknown or non-text codec, decode as the JSON default
                    return "utf-8"
                return charset
        return "utf-8"
