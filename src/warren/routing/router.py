"""Ordered route table with first-registered-wins lookup.

Routes are registered during setup and the table is frozen before the
first request. After ``compile()`` it is read-only and safe to share
across concurrently handled requests without locking.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from warren.errors import MethodNotAllowed, NotFound, RegistrationError
from warren.routing.declare import HandlerMetadata, OperationDeclaration, describe
from warren.routing.pattern import compile_pattern
from warren.routing.route import ActionDescriptor, RouteMatch, RoutePattern

logger = logging.getLogger("warren.routing")


@dataclass(slots=True)
class RouteEntry:
    """One pattern and its per-method actions. Mutable until compile()."""

    pattern: RoutePattern
    actions: dict[str, ActionDescriptor] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """A flattened (method, path, action) row for introspection."""

    method: str
    path: str
    action: ActionDescriptor


class RouteTable:
    """Ordered mapping of path patterns to per-method action descriptors.

    Usage::

        table = RouteTable()
        table.register(UserHandler)
        table.compile()
        match = table.match("GET", "/users/42")
        match.path_params  # {"id": "42"}

    Lookup tries patterns in registration order. A pattern that matches
    the path but lacks the method does not end the scan; if nothing else
    matches, the miss is reported as ``MethodNotAllowed`` rather than
    ``NotFound``.
    """

    __slots__ = ("_compiled", "_entries", "_index")

    def __init__(self) -> None:
        self._entries: list[RouteEntry] = []
        self._index: dict[str, RouteEntry] = {}
        self._compiled = False

    # -- Registration --

    def register(
        self,
        handler_type: type,
        *,
        default_methods: tuple[str, ...] = ("GET",),
    ) -> list[RouteInfo]:
        """Register every declared operation of *handler_type*.

        Returns the rows added. Raises ``RegistrationError`` on malformed
        metadata.
        """
        return self.register_metadata(
            handler_type,
            describe(handler_type),
            default_methods=default_methods,
        )

    def register_metadata(
        self,
        handler_type: type,
        metadata: HandlerMetadata,
        *,
        default_methods: tuple[str, ...] = ("GET",),
    ) -> list[RouteInfo]:
        """Register operations from an explicit ``HandlerMetadata``.

        Registering the same (pattern, method) pair again replaces the
        earlier action. This is deliberate: re-registration is an
        idempotent overwrite, and the pattern keeps its original position.
        """
        self._check_not_compiled()
        if not isinstance(handler_type, type):
            msg = f"Handlers must be classes, got {handler_type!r}"
            raise RegistrationError(msg)
        if not isinstance(metadata, HandlerMetadata):
            msg = f"{handler_type.__qualname__} has unreadable route metadata: {metadata!r}"
            raise RegistrationError(msg)
        if not isinstance(metadata.prefix, str):
            msg = f"{handler_type.__qualname__} has a non-string prefix: {metadata.prefix!r}"
            raise RegistrationError(msg)

        added: list[RouteInfo] = []
        try:
            declarations = tuple(metadata.operations)
        except TypeError:
            msg = f"{handler_type.__qualname__} has a non-iterable operations list"
            raise RegistrationError(msg) from None
        for declaration in declarations:
            if not isinstance(declaration, OperationDeclaration):
                msg = f"{handler_type.__qualname__} has an unreadable operation: {declaration!r}"
                raise RegistrationError(msg)
            added.extend(
                self._add_declaration(handler_type, metadata.prefix, declaration, default_methods)
            )
        return added

    def _add_declaration(
        self,
        handler_type: type,
        prefix: str,
        declaration: OperationDeclaration,
        default_methods: tuple[str, ...],
    ) -> list[RouteInfo]:
        name = declaration.operation
        operation = getattr(handler_type, name, None) if isinstance(name, str) else None
        if not name or not callable(operation):
            msg = (
                f"{handler_type.__qualname__} has no callable operation "
                f"{declaration.operation!r}"
            )
            raise RegistrationError(msg)
        if not isinstance(declaration.path, str):
            msg = f"{handler_type.__qualname__}.{declaration.operation} has a non-string path"
            raise RegistrationError(msg)

        methods = declaration.methods or default_methods
        if not methods:
            msg = f"{handler_type.__qualname__}.{declaration.operation} declares no HTTP methods"
            raise RegistrationError(msg)
        if (
            isinstance(methods, str)
            or not isinstance(methods, Iterable)
            or not all(isinstance(m, str) and m for m in methods)
        ):
            msg = (
                f"{handler_type.__qualname__}.{declaration.operation} has invalid HTTP methods "
                f"{methods!r}: expected a sequence of non-empty strings"
            )
            raise RegistrationError(msg)

        if isinstance(declaration.middleware, str) or not isinstance(
            declaration.middleware, Iterable
        ):
            msg = (
                f"{handler_type.__qualname__}.{declaration.operation} has a malformed "
                "middleware list"
            )
            raise RegistrationError(msg)
        for mw in declaration.middleware:
            if not (isinstance(mw, (str, type)) or callable(getattr(mw, "handle", None))):
                msg = (
                    f"{handler_type.__qualname__}.{declaration.operation} declares an invalid "
                    f"middleware {mw!r}: expected a class, an alias, or an object with handle()"
                )
                raise RegistrationError(msg)

        template = prefix + declaration.path
        entry = self._index.get(template)
        if entry is None:
            entry = RouteEntry(pattern=compile_pattern(template))
            self._index[template] = entry
            self._entries.append(entry)

        action = ActionDescriptor(
            handler_type=handler_type,
            operation=declaration.operation,
            middleware=tuple(declaration.middleware),
        )
        rows: list[RouteInfo] = []
        for method in methods:
            method = method.upper()
            previous = entry.actions.get(method)
            if previous is not None:
                logger.debug(
                    "Route %s %s rebound: %s -> %s", method, template, previous.label, action.label
                )
            entry.actions[method] = action
            rows.append(RouteInfo(method=method, path=template, action=action))
            logger.debug("Registered %s %s -> %s", method, template, action.label)
        return rows

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def _check_not_compiled(self) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

    # -- Introspection --

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        """The patterns in registration order."""
        return tuple(self._entries)

    @property
    def routes(self) -> list[RouteInfo]:
        """Every (method, path, action) row, in registration order."""
        return [
            RouteInfo(method=method, path=entry.pattern.template, action=action)
            for entry in self._entries
            for method, action in entry.actions.items()
        ]

    def __len__(self) -> int:
        return len(self._entries)

    # -- Lookup --

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the action for *method* and *path*.

        Returns a ``RouteMatch`` on success.
        Raises ``MethodNotAllowed`` if some pattern matched the path but
        none of the matching patterns accepts *method*.
        Raises ``NotFound`` if no pattern matches the path.
        """
        method = method.upper()
        allowed: set[str] = set()

        for entry in self._entries:
            params = entry.pattern.match(path)
            if params is None:
                continue
            action = entry.actions.get(method)
            if action is not None:
                return RouteMatch(pattern=entry.pattern, action=action, path_params=params)
            allowed.update(entry.actions)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")
