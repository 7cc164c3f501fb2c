"""Request dispatch — route lookup, handler resolution, chain execution.

The dispatcher is the root of the core: everything between a normalized
``Request`` and the ``Response`` written back by the transport happens
here, sequentially, on the task handling the request.
"""

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from warren._internal.invoke import invoke
from warren._internal.types import ErrorHandler, MiddlewareId, MiddlewareResolver
from warren.config import AppConfig
from warren.errors import HTTPError
from warren.http.request import Request
from warren.http.response import Response
from warren.middleware.chain import build_chain
from warren.resolver import Resolver
from warren.routing.route import RouteMatch
from warren.routing.router import RouteTable
from warren.server.errors import coerce_response, handle_http_error, handle_internal_error

logger = logging.getLogger("warren.server")


class Dispatcher:
    """Dispatches requests against a compiled ``RouteTable``.

    Per request:

    1. look the route up (404/405 misses become fallback responses here);
    2. resolve the handler instance through the shared ``Resolver``;
    3. wrap the operation call in the route's middleware chain and run it.

    Global middleware, when given, wraps all of the above, fallbacks
    included. Errors never escape ``dispatch()``: they are logged and
    turned into responses.
    """

    __slots__ = (
        "_config",
        "_error_handlers",
        "_middleware",
        "_resolve_middleware",
        "_resolver",
        "_table",
    )

    def __init__(
        self,
        table: RouteTable,
        resolver: Resolver,
        *,
        config: AppConfig | None = None,
        middleware: Sequence[MiddlewareId] = (),
        middleware_resolver: MiddlewareResolver | None = None,
        error_handlers: Mapping[int | type, ErrorHandler] | None = None,
    ) -> None:
        self._table = table
        self._resolver = resolver
        self._config = config or AppConfig()
        self._middleware = tuple(middleware)
        self._resolve_middleware = middleware_resolver or self._default_middleware_resolver
        self._error_handlers = dict(error_handlers or {})

    def _default_middleware_resolver(self, mw_id: MiddlewareId) -> Any:
        if isinstance(mw_id, type):
            return self._resolver.resolve(mw_id)
        return mw_id

    async def dispatch(self, request: Request) -> Response:
        """Produce the response for *request*. Never raises."""
        try:
            if not self._middleware:
                return await self._dispatch_route(request)
            chain = build_chain(
                self._middleware,
                lambda: self._dispatch_route(request),
                request,
                self._resolve_middleware,
            )
            return await chain()
        except Exception as exc:
            return await self._recover(exc, request)

    async def _dispatch_route(self, request: Request) -> Response:
        try:
            match = self._table.match(request.method, request.path)
        except HTTPError as exc:
            return await handle_http_error(exc, request, self._error_handlers, self._config)

        request = request.with_path_params(match.path_params)
        try:
            return await self._run_action(match, request)
        except Exception as exc:
            return await self._recover(exc, request)

    async def _run_action(self, match: RouteMatch, request: Request) -> Response:
        action = match.action
        handler = self._resolver.resolve(action.handler_type)
        operation = getattr(handler, action.operation)
        args, kwargs = bind_path_params(operation, match.path_params)

        async def terminal() -> Response | None:
            result = await invoke(operation, request, Response(), *args, **kwargs)
            return coerce_response(result)

        chain = build_chain(action.middleware, terminal, request, self._resolve_middleware)
        return await chain()

    async def _recover(self, exc: Exception, request: Request) -> Response:
        if isinstance(exc, HTTPError):
            return await handle_http_error(exc, request, self._error_handlers, self._config)
        return await handle_internal_error(exc, request, self._error_handlers, self._config)


def bind_path_params(
    operation: Callable[..., Any],
    path_params: Mapping[str, str],
) -> tuple[tuple[Any, ...], dict[str, str]]:
    """Split path parameters into positional and keyword arguments.

    Parameters are bound by name, so the operation's declared parameter
    order decides where each value lands regardless of the order of the
    segments in the path template. Parameters that must be filled by
    position (positional-only ones, and everything ahead of ``*args``)
    take the capture of the same name, otherwise the next capture no
    parameter names. Captures still unnamed after that go to ``*args`` in
    capture order, or to ``**kwargs``; without either they are left out
    (they stay on ``request.path_params``). If the signature cannot be
    inspected the values are passed positionally in capture order.
    """
    try:
        signature = inspect.signature(operation)
    except (TypeError, ValueError):
        return tuple(path_params.values()), {}

    params = list(signature.parameters.values())[2:]
    kinds = {p.kind for p in params}
    takes_args = inspect.Parameter.VAR_POSITIONAL in kinds
    by_position = [
        p
        for p in params
        if p.kind is inspect.Parameter.POSITIONAL_ONLY
        or (takes_args and p.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    by_name = {
        p.name
        for p in params
        if p.kind is inspect.Parameter.KEYWORD_ONLY
        or (not takes_args and p.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD)
    }
    claimed = by_name | {p.name for p in by_position}
    spare = [(name, value) for name, value in path_params.items() if name not in claimed]

    args: list[Any] = []
    filled = True
    for param in by_position:
        if param.name in path_params:
            args.append(path_params[param.name])
        elif spare:
            args.append(spare.pop(0)[1])
        elif param.default is not inspect.Parameter.empty:
            args.append(param.default)
        else:
            filled = False
            break

    kwargs = {name: value for name, value in path_params.items() if name in by_name}
    if takes_args and filled:
        args.extend(value for _, value in spare)
    elif inspect.Parameter.VAR_KEYWORD in kinds:
        kwargs.update(spare)
    return tuple(args), kwargs
