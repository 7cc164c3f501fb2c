"""Async test client for warren applications.

Sends requests through the ASGI interface directly — no sockets — and
returns the same ``Response`` type handlers produce.
"""

from __future__ import annotations

import json as json_module
from typing import Any

from warren.app import App
from warren.http.response import Response


class TestClient:
    """Async test client for warren applications.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/users/42")
            assert response.status == 200

    Response headers come back lower-cased, excluding ``content-type``
    (available as ``response.content_type``) and ``content-length``.
    """

    __test__ = False  # Tell pytest this is not a test class
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app.freeze()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST request, optionally with a JSON body."""
        return await self.request("POST", path, headers=headers, body=body, json=json)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PUT request."""
        return await self.request("PUT", path, headers=headers, body=body, json=json)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        path_part, _, query_string = path.partition("?")

        merged = dict(headers or {})
        request_body = body or b""
        if json is not None:
            request_body = json_module.dumps(json).encode("utf-8")
            merged.setdefault("content-type", "application/json")

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in merged.items()
            ],
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        status = 200
        raw_headers: list[tuple[bytes, bytes]] = []
        parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal status, raw_headers
            if message["type"] == "http.response.start":
                status = message["status"]
                raw_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = "text/html; charset=utf-8"
        headers_out: list[tuple[str, str]] = []
        for raw_name, raw_value in raw_headers:
            name = raw_name.decode("latin-1")
            value = raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                headers_out.append((name, value))

        return Response(
            body=b"".join(parts),
            status=status,
            content_type=content_type,
            headers=tuple(headers_out),
        )
