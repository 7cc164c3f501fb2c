"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. The dispatcher hands every
handler operation a fresh default ``Response()``; operations return it
transformed, or a different one.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Serialize *data* as a JSON response."""
        response = cls(
            body=json.dumps(data, default=str),
            status=status,
            content_type="application/json",
        )
        if headers:
            response = response.with_headers(headers)
        return response

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Inspection --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header named *name* (case-insensitive)."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        """The body encoded as UTF-8 bytes."""
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")

    @property
    def text(self) -> str:
        """The body decoded as UTF-8 text."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body
