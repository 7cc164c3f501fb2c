"""Built-in middleware: CORS.

Handles preflight requests and adds the appropriate headers to every
response for allowed origins.
"""

from dataclasses import dataclass

from warren.http.request import Request
from warren.http.response import Response
from warren.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    All fields have secure defaults (nothing is allowed).
    Override what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


class CORSMiddleware:
    """Cross-Origin Resource Sharing middleware.

    - ``OPTIONS`` preflight from an allowed origin is answered with 204
      directly; the rest of the chain does not run.
    - Other requests from an allowed origin get CORS headers added to
      whatever the chain returns.
    - Requests without ``Origin`` or from other origins pass through.

    Register it globally so preflights for any path are answered::

        app.add_middleware(CORSMiddleware(CORSConfig(allow_origins=("*",))))

    Used as a class id, the resolver injects a default ``CORSConfig``.
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def is_allowed_origin(self, origin: str) -> bool:
        """Check if the origin is in the allow list."""
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _add_cors_headers(self, response: Response, origin: str) -> Response:
        cfg = self.config
        if "*" in cfg.allow_origins and not cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Origin", "*")
        else:
            response = response.with_header("Access-Control-Allow-Origin", origin)
            response = response.with_header("Vary", "Origin")
        if cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Credentials", "true")
        if cfg.expose_headers:
            response = response.with_header(
                "Access-Control-Expose-Headers", ", ".join(cfg.expose_headers)
            )
        return response

    def _preflight(self, origin: str, request_method: str | None) -> Response:
        cfg = self.config
        response = self._add_cors_headers(Response(status=204), origin)
        if request_method:
            response = response.with_header("Access-Control-Allow-Methods", ", ".join(cfg.allow_methods))
        if cfg.allow_headers:
            response = response.with_header("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers))
        return response.with_header("Access-Control-Max-Age", str(cfg.max_age))

    async def handle(self, request: Request, next: Next) -> Response:
        origin = request.header("origin")
        if origin is None or not self.is_allowed_origin(origin):
            return await next()

        if request.method == "OPTIONS":
            return self._preflight(origin, request.header("access-control-request-method"))

        response = await next()
        return self._add_cors_headers(response, origin)
