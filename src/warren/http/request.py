"""Immutable HTTP request.

The core only reads ``method`` and ``path``; headers, query and the
parsed payload are there for middleware and handler operations.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

from warren._internal.asgi import Receive, Scope
from warren.errors import HTTPError
from warren.http.headers import Headers
from warren.http.query import QueryParams

if TYPE_CHECKING:
    from warren.validation import ValidationResult
    from warren.validation.rules import Validator


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``data`` is the parsed payload: the decoded JSON document for JSON
    bodies, otherwise query parameters overlaid by url-encoded form fields.
    ``path_params`` is filled in by the dispatcher once a route matches.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    data: Any = field(default_factory=dict)
    path_params: dict[str, str] = field(default_factory=dict)
    body: bytes = field(default=b"", repr=False)

    # -- Accessors --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def is_json(self) -> bool:
        """True when the body was declared as JSON."""
        return _is_json(self.content_type)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value (case-insensitive), or *default*."""
        return self.headers.get(name, default)

    def input(self, key: str, default: Any = None) -> Any:
        """Return a single payload field, or *default*."""
        if isinstance(self.data, Mapping):
            return self.data.get(key, default)
        return default

    def all(self) -> Any:
        """Return the whole parsed payload."""
        return self.data

    def validate(self, rules: dict[str, list[Validator]]) -> ValidationResult:
        """Validate the payload against declarative *rules*.

        See ``warren.validation.validate`` for the rule format.
        """
        from warren.validation import validate

        data = self.data if isinstance(self.data, Mapping) else {}
        return validate(data, rules)

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying the matched path parameters."""
        return replace(self, path_params=dict(path_params))

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        query: str = "",
        body: bytes | str = b"",
        json_body: Any = None,
    ) -> Request:
        """Build a request directly, without a transport.

        Usage::

            Request.build("POST", "/users", json_body={"name": "ada"})
        """
        header_map = dict(headers or {})
        if json_body is not None:
            body = json.dumps(json_body)
            header_map.setdefault("content-type", "application/json")
        raw = body.encode("utf-8") if isinstance(body, str) else body
        parsed_headers = Headers(header_map)
        params = QueryParams(query)
        return cls(
            method=method.upper(),
            path=path,
            headers=parsed_headers,
            query=params,
            data=parse_payload(raw, parsed_headers.get("content-type"), params),
            body=raw,
        )

    @classmethod
    async def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        max_content_length: int | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope, reading the whole body.

        Raises ``HTTPError(413)`` when the body exceeds *max_content_length*.
        """
        headers = Headers.from_raw(scope.get("headers", ()))
        query = QueryParams(scope.get("query_string", b""))

        chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            chunk = message.get("body", b"")
            if chunk:
                size += len(chunk)
                if max_content_length is not None and size > max_content_length:
                    raise HTTPError(status=413, detail="Request body too large")
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        raw = b"".join(chunks)

        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=headers,
            query=query,
            data=parse_payload(raw, headers.get("content-type"), query),
            body=raw,
        )


def parse_payload(body: bytes, content_type: str | None, query: QueryParams) -> Any:
    """Decode a request body into the ``data`` payload.

    JSON bodies decode to the JSON document; undecodable JSON yields an
    empty dict. Anything else merges query parameters with url-encoded
    form fields, form fields taking precedence.
    """
    if _is_json(content_type):
        try:
            return json.loads(body) if body else {}
        except ValueError:
            return {}

    data: dict[str, str] = dict(query.items())
    if body and (content_type is None or "application/x-www-form-urlencoded" in content_type):
        data.update(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))
    return data


def _is_json(content_type: str | None) -> bool:
    return content_type is not None and "application/json" in content_type.lower()
