"""Middleware — Protocol-based, no inheritance required.

A middleware is any object with::

    async def handle(self, request: Request, next: Next) -> Response

Built-in middleware:
    CORSMiddleware -- Cross-Origin Resource Sharing
    JsonMiddleware -- Reject requests without a JSON content type
"""

from warren.middleware.chain import build_chain
from warren.middleware.cors import CORSConfig, CORSMiddleware
from warren.middleware.json import JsonMiddleware
from warren.middleware.protocol import Middleware, Next

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "JsonMiddleware",
    "Middleware",
    "Next",
    "build_chain",
]
