"""Tests for the built-in middleware: JSON guard and CORS."""

import json

from warren.app import App
from warren.http.request import Request
from warren.http.response import Response
from warren.middleware.cors import CORSConfig, CORSMiddleware
from warren.middleware.json import JsonMiddleware
from warren.routing.declare import route
from warren.testing import TestClient


async def _next() -> Response:
    return Response("reached")


class TestJsonMiddleware:
    async def test_json_passes(self) -> None:
        request = Request.build("POST", "/", json_body={"a": 1})
        response = await JsonMiddleware().handle(request, _next)
        assert response.text == "reached"

    async def test_json_with_params_passes(self) -> None:
        request = Request.build(
            "POST", "/", headers={"Content-Type": "application/json; charset=utf-8"}, body="{}"
        )
        response = await JsonMiddleware().handle(request, _next)
        assert response.text == "reached"

    async def test_missing_content_type_rejected(self) -> None:
        response = await JsonMiddleware().handle(Request.build("POST", "/"), _next)
        assert response.status == 400
        assert response.content_type == "application/json"
        assert response.text == '{"error": "Invalid Content-Type, expected application/json"}'

    async def test_other_content_type_rejected(self) -> None:
        request = Request.build("POST", "/", headers={"Content-Type": "text/plain"})
        response = await JsonMiddleware().handle(request, _next)
        assert response.status == 400

    async def test_lookalike_media_type_rejected(self) -> None:
        request = Request.build("POST", "/", headers={"Content-Type": "application/json-patch"})
        response = await JsonMiddleware().handle(request, _next)
        assert response.status == 400

    async def test_untouched_response_acknowledged(self) -> None:
        async def untouched() -> Response:
            return Response()

        request = Request.build("POST", "/", json_body={"a": 1})
        response = await JsonMiddleware().handle(request, untouched)
        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.text == '{"message": "Request successfully processed"}'

    async def test_empty_response_with_status_kept(self) -> None:
        async def no_content() -> Response:
            return Response().with_status(204)

        request = Request.build("POST", "/", json_body={})
        response = await JsonMiddleware().handle(request, no_content)
        assert response.status == 204
        assert response.text == ""

    async def test_handler_returning_none_acknowledged(self) -> None:
        app = App()

        @app.register
        class Hooks:
            @route("/hook", methods=["POST"], middleware=[JsonMiddleware])
            def hook(self, request, response):
                return None

        async with TestClient(app) as client:
            response = await client.post("/hook", json={"a": 1})
        assert json.loads(response.text) == {"message": "Request successfully processed"}


def _make_cors_app(config: CORSConfig | None = None) -> App:
    """Helper: create an app with CORS middleware and a simple route."""
    app = App()
    app.add_middleware(CORSMiddleware(config))

    @app.register
    class Data:
        @route("/api/data")
        def data(self, request, response):
            return {"message": "hello"}

        @route("/api/data", methods=["POST"])
        def create_data(self, request, response):
            return response.with_body("created").with_status(201)

    return app


class TestCORSNonCorsRequests:
    """Requests without an Origin header should pass through unaffected."""

    async def test_no_origin_header(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data")
            assert response.status == 200
            header_names = {name for name, _ in response.headers}
            assert "access-control-allow-origin" not in header_names


class TestCORSSimpleRequests:
    async def test_allowed_origin_gets_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get(
                "/api/data",
                headers={"Origin": "https://example.com"},
            )
            assert response.status == 200
            assert ("access-control-allow-origin", "https://example.com") in response.headers
            assert ("vary", "Origin") in response.headers

    async def test_disallowed_origin_no_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get(
                "/api/data",
                headers={"Origin": "https://evil.com"},
            )
            assert response.status == 200
            header_names = {name for name, _ in response.headers}
            assert "access-control-allow-origin" not in header_names

    async def test_wildcard_without_credentials(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://any.com"})
            assert ("access-control-allow-origin", "*") in response.headers

    async def test_credentials_echo_origin(self) -> None:
        config = CORSConfig(allow_origins=("*",), allow_credentials=True)
        app = _make_cors_app(config)
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://any.com"})
            assert ("access-control-allow-origin", "https://any.com") in response.headers
            assert ("access-control-allow-credentials", "true") in response.headers

    async def test_headers_added_to_404(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/missing", headers={"Origin": "https://any.com"})
            assert response.status == 404
            assert ("access-control-allow-origin", "*") in response.headers


class TestCORSPreflight:
    async def test_preflight_short_circuits(self) -> None:
        config = CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
            allow_headers=("Content-Type",),
            max_age=60,
        )
        app = _make_cors_app(config)
        async with TestClient(app) as client:
            response = await client.request(
                "OPTIONS",
                "/api/data",
                headers={
                    "Origin": "https://example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )
            assert response.status == 204
            assert ("access-control-allow-methods", "GET, POST") in response.headers
            assert ("access-control-allow-headers", "Content-Type") in response.headers
            assert ("access-control-max-age", "60") in response.headers

    async def test_preflight_from_unknown_origin_reaches_router(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.request(
                "OPTIONS",
                "/api/data",
                headers={"Origin": "https://evil.com"},
            )
            assert response.status == 405
