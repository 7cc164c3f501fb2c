"""Onion-style middleware composition.

``build_chain([A, B], terminal, request, resolve)`` returns a single
zero-argument continuation. Awaiting it runs A, which may await its
``next`` to run B, which may await its ``next`` to run the terminal.
Anything A does after its ``next`` returns happens after B and the
terminal have finished.

Links are built per request: each one closes over that request and the
continuation it wraps.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from warren._internal.types import MiddlewareId, MiddlewareResolver
from warren.http.request import Request
from warren.http.response import Response
from warren.middleware.protocol import Next


def build_chain(
    middleware: Sequence[MiddlewareId],
    terminal: Callable[[], Awaitable[Any]],
    request: Request,
    resolve: MiddlewareResolver,
) -> Next:
    """Wrap *terminal* in *middleware*, first id outermost.

    *resolve* turns a middleware id into an object with ``handle``; it is
    called lazily, only when the link actually runs, so a short-circuit
    never instantiates the middleware behind it.

    A link or terminal that produces ``None`` yields a default
    ``Response()`` instead, so every ``next()`` returns a response.
    """

    async def run_terminal() -> Response:
        return _or_default(await terminal())

    handler: Next = run_terminal
    for mw_id in reversed(middleware):
        handler = _link(mw_id, handler, request, resolve)
    return handler


def _link(
    mw_id: MiddlewareId,
    next_link: Next,
    request: Request,
    resolve: MiddlewareResolver,
) -> Next:
    async def call() -> Response:
        return _or_default(await resolve(mw_id).handle(request, next_link))

    return call


def _or_default(result: Response | None) -> Response:
    if result is None:
        return Response()
    return result
