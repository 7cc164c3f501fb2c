"""Declarative handler metadata.

Handler classes declare their operations with decorators; registration
reads them back as plain data (``HandlerMetadata``) and never inspects
the decorators again::

    @controller(prefix="/users")
    class UserHandler:
        @route("/{id}", methods=["GET"], middleware=[JsonMiddleware])
        def show(self, request, response, id):
            return response.with_body(id)

    describe(UserHandler)
    # HandlerMetadata(prefix="/users", operations=(OperationDeclaration(...),))
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from warren.errors import RegistrationError

ROUTES_ATTR = "__warren_routes__"
PREFIX_ATTR = "__warren_prefix__"

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


@dataclass(frozen=True, slots=True)
class OperationDeclaration:
    """One ``@route`` declaration: a path template bound to an operation."""

    path: str
    methods: tuple[str, ...]
    middleware: tuple[Any, ...] = ()
    operation: str = ""


@dataclass(frozen=True, slots=True)
class HandlerMetadata:
    """Everything registration needs to know about one handler type."""

    prefix: str = ""
    operations: tuple[OperationDeclaration, ...] = ()


def route(
    path: str,
    methods: Iterable[str] | None = None,
    middleware: Iterable[Any] = (),
) -> Callable[[F], F]:
    """Declare an operation on a handler method.

    Args:
        path: Path template, relative to the handler prefix. Use ``{name}``
            for dynamic segments.
        methods: HTTP methods. Defaults to the app's ``default_methods``
            (``["GET"]`` unless configured otherwise).
        middleware: Middleware ids run around this operation, outermost
            first.

    May be stacked to bind one method to several paths.
    """
    declared_methods = _normalize_methods(methods, path) if methods is not None else ()
    declared_middleware = tuple(middleware)

    def decorator(func: F) -> F:
        declarations = list(getattr(func, ROUTES_ATTR, ()))
        declarations.append(
            OperationDeclaration(
                path=path,
                methods=declared_methods,
                middleware=declared_middleware,
                operation=func.__name__,
            )
        )
        setattr(func, ROUTES_ATTR, tuple(declarations))
        return func

    return decorator


def controller(prefix: str = "") -> Callable[[C], C]:
    """Set the path prefix shared by every operation of a handler class."""
    if not isinstance(prefix, str):
        msg = f"Controller prefix must be a string, got {type(prefix).__name__}: {prefix!r}"
        raise RegistrationError(msg)

    def decorator(cls: C) -> C:
        setattr(cls, PREFIX_ATTR, prefix)
        return cls

    return decorator


def describe(handler_type: type) -> HandlerMetadata:
    """Read the declared metadata of *handler_type*.

    Operations are returned in definition order, base classes first.
    An operation overridden in a subclass is described once, from the
    most derived definition.

    Raises ``RegistrationError`` if *handler_type* is not a class or its
    metadata is malformed.
    """
    if not isinstance(handler_type, type):
        msg = f"Handlers must be classes, got {handler_type!r}"
        raise RegistrationError(msg)

    prefix = getattr(handler_type, PREFIX_ATTR, "")
    if not isinstance(prefix, str):
        msg = f"{handler_type.__qualname__} has a non-string prefix: {prefix!r}"
        raise RegistrationError(msg)

    seen: set[str] = set()
    ordered: list[str] = []
    for klass in reversed(handler_type.__mro__):
        for name in vars(klass):
            if name not in seen:
                seen.add(name)
                ordered.append(name)

    operations: list[OperationDeclaration] = []
    for name in ordered:
        member = getattr(handler_type, name, None)
        declarations = getattr(member, ROUTES_ATTR, None)
        if declarations is None:
            continue
        if not callable(member):
            msg = f"{handler_type.__qualname__}.{name} is declared as a route but is not callable"
            raise RegistrationError(msg)
        for declaration in declarations:
            if not isinstance(declaration, OperationDeclaration):
                msg = f"{handler_type.__qualname__}.{name} has unreadable route metadata: {declaration!r}"
                raise RegistrationError(msg)
            operations.append(declaration)

    return HandlerMetadata(prefix=prefix, operations=tuple(operations))


def _normalize_methods(methods: Iterable[str], path: str) -> tuple[str, ...]:
    if isinstance(methods, str):
        methods = [methods]
    normalized: list[str] = []
    for method in methods:
        if not isinstance(method, str) or not method.strip():
            msg = f"Route {path!r} declares an invalid HTTP method: {method!r}"
            raise RegistrationError(msg)
        upper = method.strip().upper()
        if upper not in normalized:
            normalized.append(upper)
    if not normalized:
        msg = f"Route {path!r} declares no HTTP methods"
        raise RegistrationError(msg)
    return tuple(normalized)
