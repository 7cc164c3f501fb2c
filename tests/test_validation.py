"""Tests for warren.validation — rules, messages and results."""

import pytest

from warren.validation import (
    ValidationResult,
    between,
    date,
    email,
    integer,
    matches,
    max_length,
    maximum,
    message,
    min_length,
    minimum,
    number,
    of_type,
    one_of,
    required,
    url,
    validate,
)


class TestRequired:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_missing(self, value: object) -> None:
        assert required(value) == "This field is required"

    @pytest.mark.parametrize("value", ["x", 0, False, [1]])
    def test_present(self, value: object) -> None:
        assert required(value) is None


class TestSizeRules:
    def test_length(self) -> None:
        assert max_length(3)("abcd") == "Must be at most 3 characters"
        assert max_length(3)("abc") is None
        assert min_length(2)("a") == "Must be at least 2 characters"

    def test_minimum_numeric(self) -> None:
        assert minimum(18)(17) == "Must be at least 18"
        assert minimum(18)("21") is None

    def test_minimum_on_text_uses_length(self) -> None:
        assert minimum(3)("ab") == "Must be at least 3 characters"

    def test_maximum(self) -> None:
        assert maximum(10)(11) == "Must be no more than 10"
        assert maximum(3)("abcd") == "Must be no more than 3 characters"

    def test_between(self) -> None:
        rule = between(2, 5)
        assert rule(1) is not None
        assert rule(3) is None
        assert rule(6) is not None
        assert rule("abc") is None

    def test_missing_values_pass(self) -> None:
        for rule in (max_length(1), min_length(5), minimum(1), maximum(0), between(1, 2)):
            assert rule(None) is None
            assert rule("") is None


class TestFormatRules:
    def test_email(self) -> None:
        assert email("ada@example.com") is None
        assert email("not-an-email") == "Must be a valid email address"

    def test_url(self) -> None:
        assert url("https://example.com/x") is None
        assert url("ftp://example.com") == "Must be a valid URL"

    def test_matches(self) -> None:
        rule = matches(r"^[a-z]+$", "lowercase only")
        assert rule("abc") is None
        assert rule("ABC") == "lowercase only"

    def test_date(self) -> None:
        assert date()("2024-02-29") is None
        assert date()("2023-02-29") is not None
        assert date("%d/%m/%Y")("31/12/2024") is None

    def test_date_must_read_back_exactly(self) -> None:
        assert date()("2024-1-5") == "Must be a valid date in the format %Y-%m-%d"
        assert date()("2024-01-05") is None
        assert date("%d/%m/%Y")("5/1/2024") is not None

    def test_one_of(self) -> None:
        rule = one_of("admin", "user")
        assert rule("admin") is None
        assert rule("root") == "Must be one of: admin, user"

    def test_one_of_rejects_unhashable_values(self) -> None:
        rule = one_of("admin", "user")
        assert rule(["admin"]) == "Must be one of: admin, user"
        assert rule({"role": "admin"}) == "Must be one of: admin, user"


class TestTypeRules:
    def test_of_type(self) -> None:
        assert of_type("integer")(3) is None
        assert of_type("integer")("3") == "Must be of type integer"
        assert of_type("integer")(True) == "Must be of type integer"
        assert of_type("array")([1]) is None
        assert of_type("object")({}) is None

    def test_unknown_type_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown data type"):
            of_type("decimal")

    def test_integer(self) -> None:
        assert integer("42") is None
        assert integer(4.0) is None
        assert integer(4.5) == "Must be a whole number"
        assert integer("4.5") == "Must be a whole number"
        assert integer(True) == "Must be a whole number"

    def test_number(self) -> None:
        assert number("4.5") is None
        assert number(3) is None
        assert number("four") == "Must be a number"


class TestValidate:
    def test_valid(self) -> None:
        result = validate(
            {"name": "ada", "email": "ada@example.com", "extra": 1},
            {"name": [required, between(2, 50)], "email": [required, email]},
        )
        assert result
        assert result.is_valid
        assert result.data == {"name": "ada", "email": "ada@example.com"}

    def test_collects_errors_per_field(self) -> None:
        result = validate(
            {"name": "a", "email": "nope"},
            {"name": [min_length(2), matches(r"^\d+$")], "email": [email]},
        )
        assert not result
        assert result.errors == {
            "name": ["Must be at least 2 characters", "Must match pattern: ^\\d+$"],
            "email": ["Must be a valid email address"],
        }
        assert result.data == {}

    def test_required_stops_field(self) -> None:
        result = validate({}, {"name": [required, min_length(2)]})
        assert result.errors == {"name": ["This field is required"]}

    def test_custom_message(self) -> None:
        result = validate(
            {"age": "12"},
            {"age": [message(minimum(18), "You must be an adult")]},
        )
        assert result.errors == {"age": ["You must be an adult"]}

    def test_custom_required_message_still_stops(self) -> None:
        result = validate({}, {"name": [message(required, "Name please"), min_length(2)]})
        assert result.errors == {"name": ["Name please"]}

    def test_messages_flattened(self) -> None:
        result = ValidationResult(data={}, errors={"a": ["x", "y"], "b": ["z"]})
        assert result.messages == ["x", "y", "z"]

    def test_json_list_for_choice_field_is_an_error(self) -> None:
        result = validate({"role": ["admin"]}, {"role": [one_of("admin", "user")]})
        assert result.errors == {"role": ["Must be one of: admin, user"]}

    def test_unpadded_date_is_an_error(self) -> None:
        result = validate({"day": "2024-1-5"}, {"day": [date()]})
        assert not result.is_valid
        assert "day" in result.errors
