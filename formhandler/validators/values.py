"""Validators for plain submitted values."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from formhandler.exceptions import ValidationError
from formhandler.validators.base import AbstractValidator


class StringValidator(AbstractValidator):
    """Length check on a string value. A bound of 0 means unbounded."""

    default_messages = {
        **AbstractValidator.default_messages,
        "too_short": "This value must be at least {min_length} characters long.",
        "too_long": "This value must be at most {max_length} characters long.",
    }

    def __init__(
        self,
        min_length: int = 0,
        max_length: int = 0,
        required: bool = True,
        messages: dict[str, str] | None = None,
    ):
        super().__init__(required, messages)
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, field) -> None:
        value = field.value
        if not self.check_required(value):
            return

        length = len(str(value))
        if self.min_length and length < self.min_length:
            self.fail("too_short", min_length=self.min_length, max_length=self.max_length)
        if self.max_length and length > self.max_length:
            self.fail("too_long", min_length=self.min_length, max_length=self.max_length)


class NumberValidator(AbstractValidator):
    default_messages = {
        **AbstractValidator.default_messages,
        "not_a_number": "This value must be a number.",
        "too_small": "This value must be at least {minimum}.",
        "too_large": "This value must be at most {maximum}.",
    }

    def __init__(
        self,
        minimum: float | None = None,
        maximum: float | None = None,
        decimals: bool = False,
        required: bool = True,
        messages: dict[str, str] | None = None,
    ):
        super().__init__(required, messages)
        self.minimum = minimum
        self.maximum = maximum
        self.decimals = decimals

    def parse(self, value: Any) -> float | int:
        text = str(value).strip()
        try:
            return float(text) if self.decimals else int(text)
        except ValueError:
            self.fail("not_a_number")

    def validate(self, field) -> None:
        value = field.value
        if not self.check_required(value):
            return

        number = self.parse(value)
        if self.minimum is not None and number < self.minimum:
            self.fail("too_small", minimum=self.minimum, maximum=self.maximum)
        if self.maximum is not None and number > self.maximum:
            self.fail("too_large", minimum=self.minimum, maximum=self.maximum)


class RegexValidator(AbstractValidator):
    """Value must match ``pattern`` (searched, anchor it yourself).

    With ``not_match`` the value must *not* match.
    """

    default_messages = {
        **AbstractValidator.default_messages,
        "no_match": "This value is not valid.",
    }

    def __init__(
        self,
        pattern: str | re.Pattern,
        required: bool = True,
        messages: dict[str, str] | None = None,
        not_match: bool = False,
    ):
        super().__init__(required, messages)
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.not_match = not_match

    def validate(self, field) -> None:
        value = field.value
        if not self.check_required(value):
            return

        matched = self.pattern.search(str(value)) is not None
        if matched == self.not_match:
            self.fail("no_match")


class FunctionValidator(AbstractValidator):
    """Delegate to ``callback(value)``.

    The callback returns True when the value is fine, False to use the
    ``invalid`` message, or a string that becomes the error message.
    """

    default_messages = {
        **AbstractValidator.default_messages,
        "invalid": "This value is not valid.",
    }

    def __init__(
        self,
        callback: Callable[[Any], bool | str],
        required: bool = True,
        messages: dict[str, str] | None = None,
    ):
        super().__init__(required, messages)
        self.callback = callback

    def validate(self, field) -> None:
        value = field.value
        if not self.check_required(value):
            return

        result = self.callback(value)
        if isinstance(result, str):
            raise ValidationError(result, code="invalid")
        if not result:
            self.fail("invalid")
