"""Path template compilation.

A template is literal text with zero or more ``{name}`` segments. Each
segment captures one or more non-slash characters; everything else is
matched literally, regex metacharacters included.
"""

import re

from warren.errors import RegistrationError
from warren.routing.route import RoutePattern

# {name} where name is a valid Python identifier (regex group names must be)
PARAM_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

# What a single {name} segment captures
SEGMENT_PATTERN = r"[^/]+"


def compile_pattern(template: str) -> RoutePattern:
    """Compile a path template into an anchored ``RoutePattern``.

    Examples::

        "/users"            -> /users
        "/users/{id}"       -> /users/(?P<id>[^/]+)
        "/files/{name}.txt" -> /files/(?P<name>[^/]+)\\.txt

    The regex is always applied with ``fullmatch``.

    Raises ``RegistrationError`` if *template* is not a string or names
    the same parameter twice.
    """
    if not isinstance(template, str):
        msg = f"Route path must be a string, got {type(template).__name__}: {template!r}"
        raise RegistrationError(msg)

    parts: list[str] = []
    names: list[str] = []
    cursor = 0
    for found in PARAM_RE.finditer(template):
        name = found.group(1)
        if name in names:
            msg = f"Duplicate path parameter {{{name}}} in route {template!r}"
            raise RegistrationError(msg)
        names.append(name)
        parts.append(re.escape(template[cursor : found.start()]))
        parts.append(f"(?P<{name}>{SEGMENT_PATTERN})")
        cursor = found.end()
    parts.append(re.escape(template[cursor:]))

    return RoutePattern(
        template=template,
        regex=re.compile("".join(parts)),
        param_names=tuple(names),
    )
