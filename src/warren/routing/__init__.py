"""Routing — ordered route table built from declarative handler metadata.

Routes are registered during setup and the table is frozen before the
first request is served.
"""

from warren.routing.declare import (
    HandlerMetadata,
    OperationDeclaration,
    controller,
    describe,
    route,
)
from warren.routing.pattern import compile_pattern
from warren.routing.route import ActionDescriptor, RouteMatch, RoutePattern
from warren.routing.router import RouteEntry, RouteInfo, RouteTable

__all__ = [
    "ActionDescriptor",
    "HandlerMetadata",
    "OperationDeclaration",
    "RouteEntry",
    "RouteInfo",
    "RouteMatch",
    "RoutePattern",
    "RouteTable",
    "compile_pattern",
    "controller",
    "describe",
    "route",
]
