"""HTTP responses with a chainable .with_*() transformation API.

Each transformation returns a new response. The body is carried by
reference: transforming a ``StreamingResponse`` never touches its
chunk iterator, so a single-consumption stream survives header
rewrites intact.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any, TypeAlias

from perch.http.headers import merge_headers


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``reason`` is the status text (``statusText``); ASGI servers pick
    their own phrase, so it is informational only. ``content_type`` is
    ``None`` for responses that carry no body (e.g. a 204 preflight).
    """

    body: str | bytes = ""
    status: int = 200
    reason: str = ""
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_overlaid_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response whose same-named headers are replaced."""
        return replace(self, headers=merge_headers(self.headers, headers))

    def with_content_type(self, content_type: str | None) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the last value set for *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == wanted:
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    @property
    def json(self) -> Any:
        """Body parsed as JSON."""
        return json_module.loads(self.body_bytes)


@dataclass(frozen=True, slots=True)
class StreamingResponse:
    """A response whose body is produced chunk by chunk.

    Sent with chunked transfer encoding. Supports the same
    ``.with_*()`` API as ``Response`` so the CORS decorator can rewrite
    headers without knowing the body is a stream.
    """

    chunks: Iterator[str | bytes] | AsyncIterator[str | bytes]
    status: int = 200
    reason: str = ""
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> StreamingResponse:
        """Return a new StreamingResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> StreamingResponse:
        """Return a new StreamingResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> StreamingResponse:
        """Return a new StreamingResponse with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_overlaid_headers(self, headers: Mapping[str, str]) -> StreamingResponse:
        """Return a new StreamingResponse whose same-named headers are replaced."""
        return replace(self, headers=merge_headers(self.headers, headers))

    def with_content_type(self, content_type: str | None) -> StreamingResponse:
        """Return a new StreamingResponse with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the last value set for *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == wanted:
                return value
        return default


AnyResponse: TypeAlias = Response | StreamingResponse
