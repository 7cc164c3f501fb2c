"""Payload validation — composable rules, clean results.

Usage::

    from warren.validation import between, email, required, validate

    result = validate(request.data, {
        "name": [required, between(2, 50)],
        "email": [required, email],
    })
    if not result:
        return Response.json({"errors": result.errors}, status=422)

Rules can carry custom messages with ``message(rule, text)``.
"""

from collections.abc import Mapping
from typing import Any

from warren.validation.result import ValidationResult
from warren.validation.rules import (
    Validator,
    between,
    date,
    email,
    integer,
    matches,
    max_length,
    maximum,
    min_length,
    minimum,
    number,
    of_type,
    one_of,
    required,
    url,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "between",
    "date",
    "email",
    "integer",
    "matches",
    "max_length",
    "maximum",
    "message",
    "min_length",
    "minimum",
    "number",
    "of_type",
    "one_of",
    "required",
    "url",
    "validate",
]


def message(rule: Validator, text: str) -> Validator:
    """Wrap *rule* so that its failures report *text* instead."""

    def check(value: Any) -> str | None:
        return text if rule(value) is not None else None

    # Keep presence short-circuiting in validate()
    check.__wrapped__ = rule  # type: ignore[attr-defined]
    return check


def validate(
    data: Mapping[str, Any],
    rules: dict[str, list[Validator]],
) -> ValidationResult:
    """Validate data against a set of rules.

    Args:
        data: Any mapping of field names to values — ``Request.data``,
            ``QueryParams``, or a plain ``dict``.
        rules: A dict mapping field names to lists of rules. Each rule
            returns an error message string on failure, or ``None``.

    Returns:
        A ``ValidationResult`` with ``.data`` (values of fields that
        passed) and ``.errors`` (field → list of error messages).
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}

    for field_name, validators in rules.items():
        value = data.get(field_name)

        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is not None:
                field_errors.append(error)
                # Nothing else is worth checking on a missing value
                if getattr(validator, "__wrapped__", validator) is required:
                    break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
