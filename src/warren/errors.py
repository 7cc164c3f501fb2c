"""Warren exception hierarchy.

Shared across the route table, resolver, dispatcher and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class WarrenError(Exception):
    """Base for all warren-specific errors."""


class ConfigurationError(WarrenError):
    """Raised when app configuration is invalid.

    Typically surfaces during ``App.freeze()`` at startup.
    """


class RegistrationError(ConfigurationError):
    """Handler metadata is malformed or unreadable.

    Raised immediately by ``register()``; it is a programming error and
    aborts startup.
    """


class ResolutionError(WarrenError):
    """A dependency graph could not be constructed.

    ``chain`` is the sequence of types that led to the failure, ending
    with the offending ``type_id``.
    """

    def __init__(self, type_id: object, chain: tuple[object, ...] = (), reason: str = "") -> None:
        self.type_id = type_id
        self.chain = chain or (type_id,)
        self.reason = reason
        super().__init__(self._format())

    @property
    def path(self) -> str:
        """The resolution chain rendered as ``A -> B -> C``."""
        return " -> ".join(_type_name(t) for t in self.chain)

    def _format(self) -> str:
        msg = f"Cannot resolve {_type_name(self.type_id)}"
        if self.reason:
            msg = f"{msg}: {self.reason}"
        if len(self.chain) > 1:
            msg = f"{msg} (resolution chain: {self.path})"
        return msg


class CircularDependencyError(ResolutionError):
    """A type depends on itself, directly or through other types."""

    def __init__(self, type_id: object, chain: tuple[object, ...]) -> None:
        super().__init__(type_id, (*chain, type_id), reason="circular dependency")


def _type_name(type_id: object) -> str:
    qualname = getattr(type_id, "__qualname__", None)
    if qualname is None:
        return repr(type_id)
    module = getattr(type_id, "__module__", "")
    if module in ("", "builtins", "__main__"):
        return qualname
    return f"{module}.{qualname}"


@dataclass(frozen=True, slots=True)
class HTTPError(WarrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the route table, middleware, or handler operations. The
    dispatcher catches these and converts them into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route pattern matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — a pattern matched the path but not the HTTP method.

    ``allowed`` collects the methods of every pattern that matched, and
    is echoed in the ``Allow`` header.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )

    @property
    def allowed(self) -> frozenset[str]:
        """The methods the matched path does accept."""
        for name, value in self.headers:
            if name == "Allow":
                return frozenset(m.strip() for m in value.split(",") if m.strip())
        return frozenset()
