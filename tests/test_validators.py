"""Tests for the value validators."""

import re

import pytest

from formhandler.exceptions import ValidationError
from formhandler.form import Form
from formhandler.validators import (
    AbstractValidator,
    FunctionValidator,
    NumberValidator,
    RegexValidator,
    StringValidator,
)


@pytest.fixture
def field_with(make_submission):
    """Text field named ``value`` posted with ``value`` and checked by ``validator``."""
    def _make(value, validator):
        form = Form(make_submission(data={"value": value, "other": "x"}), csrf_protection=False)
        return form.text_field("value").add_validator(validator)
    return _make


class TestAbstractValidator:
    def test_validate_is_abstract(self):
        with pytest.raises(NotImplementedError):
            AbstractValidator().validate(None)

    def test_fail_raises_with_code(self):
        validator = StringValidator(messages={"too_short": "Min {min_length}"})
        with pytest.raises(ValidationError) as exc_info:
            validator.fail("too_short", min_length=3)
        assert exc_info.value.message == "Min 3"
        assert exc_info.value.code == "too_short"

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_is_empty(self, value):
        assert AbstractValidator.is_empty(value)

    @pytest.mark.parametrize("value", ["0", 0, ["a"], False])
    def test_is_not_empty(self, value):
        assert AbstractValidator.is_empty(value) is False


class TestStringValidator:
    def test_required(self, field_with):
        field = field_with("", StringValidator())
        assert field.is_valid() is False
        assert field.error_messages == ["This field is required."]

    def test_optional_empty(self, field_with):
        assert field_with("", StringValidator(5, required=False)).is_valid()

    def test_too_short(self, field_with):
        field = field_with("ab", StringValidator(3, 10))
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be at least 3 characters long."]

    def test_too_long(self, field_with):
        field = field_with("abcdef", StringValidator(0, 5))
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be at most 5 characters long."]

    def test_zero_means_unbounded(self, field_with):
        assert field_with("x" * 500, StringValidator(0, 0)).is_valid()

    def test_field_becomes_required(self, field_with):
        field = field_with("abc", StringValidator())
        assert field.is_required
        assert field_with("abc", StringValidator(required=False)).is_required is False


class TestNumberValidator:
    @pytest.mark.parametrize("value", ["abc", "1.5", "1e3"])
    def test_not_an_integer(self, field_with, value):
        field = field_with(value, NumberValidator())
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be a number."]

    def test_decimals(self, field_with):
        assert field_with("1.5", NumberValidator(decimals=True)).is_valid()

    def test_bounds(self, field_with):
        assert field_with("5", NumberValidator(1, 10)).is_valid()

        field = field_with("0", NumberValidator(1, 10))
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be at least 1."]

        field = field_with("11", NumberValidator(1, 10))
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be at most 10."]


class TestRegexValidator:
    def test_match(self, field_with):
        assert field_with("1234AB", RegexValidator(r"^\d{4}[A-Z]{2}$")).is_valid()

    def test_no_match(self, field_with):
        field = field_with("12", RegexValidator(r"^\d{4}[A-Z]{2}$"))
        assert field.is_valid() is False
        assert field.error_messages == ["This value is not valid."]

    def test_not_match(self, field_with):
        validator = RegexValidator(re.compile(r"<.*>"), not_match=True)
        assert field_with("plain", validator).is_valid()
        assert field_with("<b>", RegexValidator(r"<.*>", not_match=True)).is_valid() is False

    def test_custom_message(self, field_with):
        validator = RegexValidator(r"@", messages={"no_match": "Not an email"})
        field = field_with("nope", validator)
        field.is_valid()
        assert field.error_messages == ["Not an email"]


class TestFunctionValidator:
    def test_true_is_valid(self, field_with):
        assert field_with("ok", FunctionValidator(lambda value: True)).is_valid()

    def test_false_uses_invalid_message(self, field_with):
        field = field_with("ok", FunctionValidator(lambda value: False))
        assert field.is_valid() is False
        assert field.error_messages == ["This value is not valid."]

    def test_string_becomes_message(self, field_with):
        field = field_with("taken", FunctionValidator(lambda value: f"{value} is already in use"))
        assert field.is_valid() is False
        assert field.error_messages == ["taken is already in use"]

    def test_not_called_for_optional_empty(self, field_with):
        calls = []
        field = field_with("", FunctionValidator(calls.append, required=False))
        assert field.is_valid()
        assert calls == []


class TestValidatorChain:
    def test_stops_at_first_failure(self, field_with):
        field = field_with("ab", StringValidator(3))
        field.add_validator(RegexValidator(r"^\d+$"))
        assert field.is_valid() is False
        assert field.error_messages == ["This value must be at least 3 characters long."]

    def test_set_validator_replaces(self, field_with):
        field = field_with("ab", StringValidator(3))
        field.set_validator(StringValidator(1))
        assert field.is_valid()
