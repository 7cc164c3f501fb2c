"""Validation result — immutable container for validated data or errors."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating a payload against a set of rules.

    The result is falsy when invalid, so you can write::

        result = request.validate(rules)
        if not result:
            return Response.json({"errors": result.messages}, status=422)

    ``data`` holds the values of every field that passed its rules.
    ``errors`` maps field names to lists of error messages::

        {"title": ["This field is required"],
         "email": ["Must be a valid email address"]}
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    @property
    def messages(self) -> list[str]:
        """Every error message, flattened in field order."""
        return [message for field_errors in self.errors.values() for message in field_errors]

    def __bool__(self) -> bool:
        return self.is_valid
