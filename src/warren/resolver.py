"""Constructor-injection resolver with a process-lifetime instance cache.

``Resolver.resolve(T)`` returns the single instance of ``T``, building it
on first use. Constructor parameters annotated with a resolvable class are
resolved recursively; everything else falls back to its default value or
``None``::

    class Repo: ...

    class UserHandler:
        def __init__(self, repo: Repo, page_size: int = 20) -> None: ...

    resolver = Resolver()
    handler = resolver.resolve(UserHandler)   # Repo() built and cached too
    resolver.resolve(UserHandler) is handler  # True

Lifecycle:
    The cache is created empty with the app, filled lazily during
    registration and dispatch, and never evicted while the process runs.

Thread safety:
    A single re-entrant lock guards the whole check-and-create sequence,
    so concurrent first requests construct at most one instance per type.
    The lock is re-entrant because resolution recurses on the same thread.
"""

import inspect
import logging
import threading
import types
import typing
from collections.abc import Callable
from typing import Any

from warren.errors import CircularDependencyError, ResolutionError

logger = logging.getLogger("warren.resolver")

_NoneType = type(None)


class Resolver:
    """Builds and caches one instance per type.

    Factories registered with ``provide()`` take precedence over
    constructor introspection; objects registered with ``instance()``
    are returned as-is.
    """

    __slots__ = ("_factories", "_instances", "_lock")

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}
        self._factories: dict[type, Callable[[], Any]] = {}
        self._lock = threading.RLock()

    # -- Registration --

    def provide(self, type_id: type, factory: Callable[[], Any]) -> None:
        """Build *type_id* by calling *factory* (no arguments) on first use."""
        with self._lock:
            self._factories[type_id] = factory

    def instance(self, type_id: type, obj: Any) -> None:
        """Register a pre-built object as the instance of *type_id*."""
        with self._lock:
            self._instances[type_id] = obj

    def clear(self) -> None:
        """Drop every cached instance. Intended for tests only."""
        with self._lock:
            self._instances.clear()

    # -- Resolution --

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._instances

    def resolve(self, type_id: type) -> Any:
        """Return the cached instance of *type_id*, building it if needed.

        Raises ``ResolutionError`` (or its ``CircularDependencyError``
        subclass) naming the offending type and the chain that led to it.
        """
        cached = self._instances.get(type_id)
        if cached is not None:
            return cached
        with self._lock:
            return self._resolve(type_id, ())

    def _resolve(self, type_id: type, chain: tuple[type, ...]) -> Any:
        if type_id in self._instances:
            return self._instances[type_id]
        if type_id in chain:
            raise CircularDependencyError(type_id, chain)

        here = (*chain, type_id)
        factory = self._factories.get(type_id)
        if factory is not None:
            try:
                obj = factory()
            except ResolutionError:
                raise
            except Exception as exc:
                raise ResolutionError(type_id, here, f"provider raised {exc!r}") from exc
        else:
            obj = self._construct(type_id, here)

        self._instances[type_id] = obj
        logger.debug("Resolved %s", _label(type_id))
        return obj

    def _construct(self, type_id: type, chain: tuple[type, ...]) -> Any:
        if not isinstance(type_id, type):
            raise ResolutionError(type_id, chain, "not a class")
        if type_id.__module__ == "builtins":
            raise ResolutionError(type_id, chain, "built-in types are not resolvable")
        if inspect.isabstract(type_id) or getattr(type_id, "_is_protocol", False):
            raise ResolutionError(type_id, chain, "abstract types cannot be instantiated")

        kwargs: dict[str, Any] = {}
        for param, annotation in _constructor_params(type_id, chain):
            dependency = resolvable_type(annotation)
            if dependency is not None:
                kwargs[param.name] = self._resolve(dependency, chain)
            elif param.default is not inspect.Parameter.empty:
                continue
            elif annotation is inspect.Parameter.empty or _accepts_none(annotation):
                kwargs[param.name] = None
            else:
                reason = (
                    f"parameter {param.name!r} of type {_label(annotation)} "
                    "has no default and is not resolvable"
                )
                raise ResolutionError(type_id, chain, reason)

        try:
            return type_id(**kwargs)
        except ResolutionError:
            raise
        except Exception as exc:
            raise ResolutionError(type_id, chain, f"constructor raised {exc!r}") from exc


def resolvable_type(annotation: Any) -> type | None:
    """Return the class to inject for *annotation*, or ``None``.

    A concrete user class is resolvable; so is ``X | None`` when ``X`` is.
    Built-ins (``int``, ``str``, ``dict`` ...), typing constructs, and
    unions of several classes are not. Neither is a missing annotation.
    """
    if annotation is inspect.Parameter.empty:
        return None
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not _NoneType]
        if len(members) == 1:
            return resolvable_type(members[0])
        return None
    if origin is not None:
        return None
    if not isinstance(annotation, type):
        return None
    if annotation.__module__ == "builtins":
        return None
    return annotation


def _accepts_none(annotation: Any) -> bool:
    if annotation is None or annotation is _NoneType or annotation is Any:
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return _NoneType in typing.get_args(annotation)
    return False


def _constructor_params(
    type_id: type, chain: tuple[type, ...]
) -> list[tuple[inspect.Parameter, Any]]:
    """The injectable ``__init__`` parameters of *type_id* with evaluated hints."""
    init = type_id.__init__
    if init is object.__init__:
        return []
    try:
        signature = inspect.signature(type_id)
        hints = typing.get_type_hints(init)
    except (NameError, TypeError, ValueError) as exc:
        raise ResolutionError(type_id, chain, f"unreadable constructor signature: {exc}") from exc

    params: list[tuple[inspect.Parameter, Any]] = []
    for param in signature.parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        params.append((param, hints.get(param.name, param.annotation)))
    return params


def _label(type_id: Any) -> str:
    return getattr(type_id, "__qualname__", None) or repr(type_id)
