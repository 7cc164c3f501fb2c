"""Built-in validation rules.

Each rule is a callable with the signature::

    def rule(value) -> str | None:
        '''Return error message, or None if valid.'''

Parameterized rules are factory functions that return a rule::

    def max_length(n: int) -> Validator:
        def check(value) -> str | None:
            if len(value) > n:
                return f"Must be at most {n} characters"
            return None
        return check

Values come from ``Request.data`` and may be strings (form fields) or
any JSON type. Rules other than ``required`` treat a missing value
(``None`` or ``""``) as valid, so optional fields only need to satisfy
their rules when present.
"""

import re
from collections.abc import Callable, Hashable
from datetime import datetime
from typing import Any

type Validator = Callable[[Any], str | None]


def _missing(value: Any) -> bool:
    return value is None or value == ""


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: Any) -> str | None:
    """Field must be present and non-empty."""
    if value is None or value == [] or value == {}:
        return "This field is required"
    if isinstance(value, str) and not value.strip():
        return "This field is required"
    return None


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


def max_length(n: int) -> Validator:
    """String must be at most *n* characters."""

    def check(value: Any) -> str | None:
        if not _missing(value) and len(str(value)) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Validator:
    """String must be at least *n* characters."""

    def check(value: Any) -> str | None:
        if not _missing(value) and len(str(value)) < n:
            return f"Must be at least {n} characters"
        return None

    return check


def minimum(n: float) -> Validator:
    """Numbers must be at least *n*; other values at least *n* characters long."""

    def check(value: Any) -> str | None:
        if _missing(value):
            return None
        if _is_number(value):
            if float(value) < n:
                return f"Must be at least {n}"
        elif len(str(value)) < n:
            return f"Must be at least {n} characters"
        return None

    return check


def maximum(n: float) -> Validator:
    """Numbers must be at most *n*; other values at most *n* characters long."""

    def check(value: Any) -> str | None:
        if _missing(value):
            return None
        if _is_number(value):
            if float(value) > n:
                return f"Must be no more than {n}"
        elif len(str(value)) > n:
            return f"Must be no more than {n} characters"
        return None

    return check


def between(low: float, high: float) -> Validator:
    """Numbers (or lengths, for other values) must lie within [low, high]."""
    lower = minimum(low)
    upper = maximum(high)

    def check(value: Any) -> str | None:
        return lower(value) or upper(value)

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

# Scheme and host structure
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def email(value: Any) -> str | None:
    """Value must be a valid email address (basic format check)."""
    if _missing(value):
        return None
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return "Must be a valid email address"
    return None


def url(value: Any) -> str | None:
    """Value must be a valid URL (http/https)."""
    if _missing(value):
        return None
    if not isinstance(value, str) or not _URL_RE.match(value):
        return "Must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Validator:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if _missing(value):
            return None
        if not compiled.match(str(value)):
            return message or f"Must match pattern: {pattern}"
        return None

    return check


def date(fmt: str = "%Y-%m-%d") -> Validator:
    """Value must be a date string in *fmt* (``strptime`` syntax).

    The value has to read back exactly, so ``2024-1-5`` is not a
    ``%Y-%m-%d`` date even though ``strptime`` would accept it.
    """

    def check(value: Any) -> str | None:
        if _missing(value):
            return None
        text = str(value)
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            return f"Must be a valid date in the format {fmt}"
        if parsed.strftime(fmt) != text:
            return f"Must be a valid date in the format {fmt}"
        return None

    return check


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: str) -> Validator:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)

    def check(value: Any) -> str | None:
        if _missing(value):
            return None
        if not isinstance(value, Hashable) or value not in allowed:
            options = ", ".join(sorted(allowed))
            return f"Must be one of: {options}"
        return None

    return check


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

_TYPES: dict[str, tuple[type, ...]] = {
    "integer": (int,),
    "float": (float,),
    "string": (str,),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


def of_type(name: str) -> Validator:
    """Value must be of JSON type *name* (``integer``, ``string``, ``array`` ...).

    Raises ``ValueError`` immediately for an unknown type name.
    """
    if name not in _TYPES:
        msg = f"Unknown data type: {name}"
        raise ValueError(msg)
    expected = _TYPES[name]

    def check(value: Any) -> str | None:
        if value is None:
            return None
        ok = isinstance(value, expected)
        if name in ("integer", "float") and isinstance(value, bool):
            ok = False
        if not ok:
            return f"Must be of type {name}"
        return None

    return check


def integer(value: Any) -> str | None:
    """Value must be a valid integer."""
    if _missing(value):
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        return "Must be a whole number"
    try:
        int(value)
    except (ValueError, TypeError):
        return "Must be a whole number"
    return None


def number(value: Any) -> str | None:
    """Value must be a valid number (int or float)."""
    if _missing(value):
        return None
    if not _is_number(value):
        return "Must be a number"
    return None
