"""Error recovery for the dispatcher.

Maps HTTPError exceptions, resolution failures and unexpected exceptions
to Response objects, using registered error handlers or the fallback
bodies from ``AppConfig``.
"""

import html
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from warren._internal.invoke import invoke
from warren.config import AppConfig
from warren.errors import HTTPError, ResolutionError
from warren.http.request import Request
from warren.http.response import Response

logger = logging.getLogger("warren.server")


def coerce_response(result: Any) -> Response | None:
    """Turn a handler-style return value into a Response.

    ``Response`` passes through, ``str``/``bytes`` become the body,
    ``dict``/``list`` become JSON, ``None`` stays ``None``.
    """
    if result is None or isinstance(result, Response):
        return result
    if isinstance(result, (str, bytes)):
        return Response(body=result)
    if isinstance(result, (dict, list)):
        return Response.json(result)
    msg = f"Cannot convert {type(result).__name__} to a Response"
    raise TypeError(msg)


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response | None:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    params = list(inspect.signature(handler).parameters.values())
    if len(params) >= 2:
        result = await invoke(handler, request, exc)
    elif len(params) == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)
    return coerce_response(result)


def _lookup(
    error_handlers: Mapping[int | type, Callable[..., Any]],
    exc: Exception,
    status: int,
) -> Callable[..., Any] | None:
    for klass in type(exc).__mro__:
        if klass in error_handlers:
            return error_handlers[klass]
    return error_handlers.get(status)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: Mapping[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    """Map an HTTPError to a Response.

    404 and 405 use the configured fallback bodies; other statuses use
    the error detail. The error's headers (e.g. ``Allow``) are always kept.
    """
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    handler = _lookup(error_handlers, exc, exc.status)
    response: Response | None = None
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Keep the error status unless the handler chose its own
        if response is not None and response.status == 200:
            response = response.with_status(exc.status)

    if response is None:
        if exc.status == 404:
            body = config.not_found_body
        elif exc.status == 405:
            body = config.method_not_allowed_body
        else:
            body = html.escape(exc.detail or f"Error {exc.status}")
        response = Response(body=body, status=exc.status)

    present = {name.lower() for name, _ in response.headers}
    for name, value in exc.headers:
        if name.lower() not in present:
            response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: Mapping[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    """Handle resolution failures and unexpected exceptions as 500 errors."""
    if isinstance(exc, ResolutionError):
        logger.error(
            "500 %s %s — cannot resolve %s (chain: %s)",
            request.method,
            request.path,
            getattr(exc.type_id, "__qualname__", exc.type_id),
            exc.path,
        )
    else:
        logger.exception("500 %s %s", request.method, request.path)

    handler = _lookup(error_handlers, exc, 500)
    if handler is not None:
        try:
            response = await call_error_handler(handler, request, exc)
        except Exception:
            logger.exception("Error handler for %s failed", type(exc).__name__)
            response = None
        if response is not None:
            return response

    body = config.server_error_body
    if config.debug:
        body = f"{body}\n<pre>{html.escape(f'{type(exc).__name__}: {exc}')}</pre>"
    return Response(body=body, status=500)
