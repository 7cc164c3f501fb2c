"""RoutePattern, ActionDescriptor and RouteMatch frozen dataclasses."""

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """A compiled matcher for one full path template.

    ``/users/{id}`` -> regex ``/users/(?P<id>[^/]+)``, param_names ``("id",)``.
    Matching is anchored: the whole path must match, never a prefix.
    """

    template: str
    regex: re.Pattern[str] = field(compare=False)
    param_names: tuple[str, ...] = ()

    def match(self, path: str) -> dict[str, str] | None:
        """Return the named captures if *path* matches, else ``None``."""
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return {name: found.group(name) for name in self.param_names}


@dataclass(frozen=True, slots=True)
class ActionDescriptor:
    """The binding of one (pattern, method) pair to a handler operation.

    Created at registration and never mutated. A declaration with several
    HTTP methods shares one descriptor across all of them.
    """

    handler_type: type
    operation: str
    middleware: tuple[Any, ...] = ()

    @property
    def label(self) -> str:
        """``Handler.operation``, for logs and route listings."""
        return f"{self.handler_type.__qualname__}.{self.operation}"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    pattern: RoutePattern
    action: ActionDescriptor
    path_params: dict[str, str]
