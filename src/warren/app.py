"""Warren application class.

Mutable during setup (handler registration, middleware, providers).
Frozen at runtime when the first request arrives or ``freeze()`` is
called explicitly.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from warren._internal.asgi import Receive, Scope, Send
from warren._internal.types import ErrorHandler, MiddlewareId
from warren.config import AppConfig
from warren.errors import ConfigurationError, HTTPError, RegistrationError
from warren.http.request import Request
from warren.http.response import Response
from warren.resolver import Resolver
from warren.routing.declare import HandlerMetadata
from warren.routing.router import RouteTable
from warren.server.dispatcher import Dispatcher
from warren.server.errors import handle_http_error
from warren.server.sender import send_response

logger = logging.getLogger("warren.app")


class App:
    """The warren application.

    Usage::

        app = App()

        @app.register
        @controller(prefix="/users")
        class UserHandler:
            def __init__(self, repo: UserRepo) -> None:
                self.repo = repo

            @route("/{id}")
            def show(self, request, response, id):
                return response.with_body(self.repo.name(id))

        response = await app.dispatch(Request.build("GET", "/users/42"))

    ``App`` is also an ASGI 3.0 application.

    Thread safety:
        The setup phase is single-threaded (registration at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the route table, even when several workers serve
        their first request concurrently.
    """

    __slots__ = (
        "_aliases",
        "_dispatcher",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_table",
        "config",
        "resolver",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.resolver = Resolver()
        self.resolver.instance(AppConfig, self.config)
        self.resolver.instance(Resolver, self.resolver)
        self._table = RouteTable()
        self._middleware_list: list[MiddlewareId] = []
        self._aliases: dict[str, type] = {}
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._dispatcher: Dispatcher | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Registration --

    def register(self, handler_type: type, metadata: HandlerMetadata | None = None) -> type:
        """Register a handler class and every operation it declares.

        Usable as a class decorator. Pass *metadata* to register from an
        explicit declaration list instead of ``@route`` decorators.
        Raises ``RegistrationError`` immediately on malformed metadata.
        """
        self._check_not_frozen()
        if metadata is None:
            rows = self._table.register(handler_type, default_methods=self.config.default_methods)
        else:
            rows = self._table.register_metadata(
                handler_type, metadata, default_methods=self.config.default_methods
            )
        if not rows:
            logger.debug("%s declares no operations", handler_type.__qualname__)
        return handler_type

    def add_middleware(self, middleware: MiddlewareId) -> None:
        """Add a global middleware, run around every request in order."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def middleware_alias(self, name: str, middleware_type: type) -> None:
        """Make *middleware_type* addressable by *name* in route declarations."""
        self._check_not_frozen()
        if not isinstance(middleware_type, type):
            msg = f"Middleware alias {name!r} must name a class, got {middleware_type!r}"
            raise ConfigurationError(msg)
        self._aliases[name] = middleware_type

    def provide(self, annotation: type, factory: Callable[[], Any]) -> None:
        """Register a provider factory for dependency injection.

        Any constructor parameter annotated with *annotation* receives the
        object *factory* returns, built once and cached::

            app.provide(Database, lambda: Database(DSN))
        """
        self._check_not_frozen()
        self.resolver.provide(annotation, factory)

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        The handler may take ``()``, ``(request)`` or ``(request, exc)``
        and return a Response, a string, or ``None`` for the default.
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Runtime --

    @property
    def routes(self) -> RouteTable:
        """The route table (compiled once the app is frozen)."""
        return self._table

    def resolve_middleware(self, mw_id: MiddlewareId) -> Any:
        """Turn a middleware id into an object with ``handle``.

        Classes and aliases go through the shared resolver, so middleware
        gets constructor injection and one cached instance per type.
        Objects are used as-is.
        """
        if isinstance(mw_id, str):
            try:
                mw_id = self._aliases[mw_id]
            except KeyError:
                msg = f"Unknown middleware alias {mw_id!r}"
                raise ConfigurationError(msg) from None
        if isinstance(mw_id, type):
            return self.resolver.resolve(mw_id)
        return mw_id

    async def dispatch(self, request: Request) -> Response:
        """Dispatch *request* through middleware, routing and handlers."""
        self.freeze()
        assert self._dispatcher is not None
        return await self._dispatcher.dispatch(request)

    def freeze(self) -> None:
        """Thread-safe freeze with double-check locking.

        Validates middleware ids and compiles the route table. Raises
        ``RegistrationError`` if a route names an unknown alias.
        """
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """MUST only be called while holding _freeze_lock."""
        declared = [
            mw_id
            for entry in self._table.entries
            for action in entry.actions.values()
            for mw_id in action.middleware
        ]
        for mw_id in (*self._middleware_list, *declared):
            if isinstance(mw_id, str) and mw_id not in self._aliases:
                msg = f"Unknown middleware alias {mw_id!r}; register it with app.middleware_alias()"
                raise RegistrationError(msg)

        self._table.compile()
        self._dispatcher = Dispatcher(
            self._table,
            self.resolver,
            config=self.config,
            middleware=tuple(self._middleware_list),
            middleware_resolver=self.resolve_middleware,
            error_handlers=self._error_handlers,
        )
        self._frozen = True
        logger.debug("App frozen with %d route patterns", len(self._table))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register handlers, middleware, and providers before the first request."
            )
            raise RuntimeError(msg)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self.freeze()
        try:
            request = await Request.from_asgi(
                scope, receive, max_content_length=self.config.max_content_length
            )
        except HTTPError as exc:
            bare = Request(method=scope.get("method", "GET"), path=scope.get("path", "/"))
            response = await handle_http_error(exc, bare, self._error_handlers, self.config)
        else:
            response = await self.dispatch(request)
        await send_response(response, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup so registration errors abort the server."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self.freeze()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
