"""Shared type aliases used across warren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# A middleware identifier: a class, a registered alias, or a ready instance
MiddlewareId: TypeAlias = type | str | object

# Resolves a middleware identifier to an object exposing ``handle``
MiddlewareResolver: TypeAlias = Callable[[Any], Any]

# Error handler: receives (request, error?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]
