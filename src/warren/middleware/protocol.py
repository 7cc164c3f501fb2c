"""Middleware protocol and Next type alias.

A middleware is any object with an async ``handle`` method::

    class Timing:
        async def handle(self, request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next()
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

No base class required. Returning without awaiting ``next()``
short-circuits the rest of the chain, handler included.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from warren.http.request import Request
from warren.http.response import Response

# The rest of the chain, already bound to the current request
type Next = Callable[[], Awaitable[Response]]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for warren middleware."""

    async def handle(self, request: Request, next: Next) -> Response: ...
