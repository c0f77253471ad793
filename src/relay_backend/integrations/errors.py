from __future__ import annotations

import json
from typing import Any

import httpx


class ConfigurationError(RuntimeError):
    """A credential or identifier the integration needs is not configured."""


class UpstreamError(RuntimeError):
    """The provider answered with a non-success status.

    `body` is the provider's decoded JSON body when it has one, else the raw text.
    """

    def __init__(self, status_code: int, body: Any) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "UpstreamError":
        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        return cls(resp.status_code, body)

    @classmethod
    def from_content(cls, status_code: int, content: bytes | str | None) -> "UpstreamError":
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        try:
            body = json.loads(content or "")
        except ValueError:
            body = content or ""
        return cls(status_code, body)


def read_json(resp: httpx.Response) -> Any:
    """Return the decoded body of a successful response or raise `UpstreamError`."""

    if resp.is_error:
        raise UpstreamError.from_response(resp)
    return resp.json()
