"""Validator base class."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, NoReturn

from formhandler.exceptions import ValidationError

if TYPE_CHECKING:
    from formhandler.fields.base import AbstractFormField


class AbstractValidator:
    """Checks one field value and raises :class:`ValidationError` when rejected.

    Messages are looked up by key in ``default_messages`` and may be
    overridden per instance through ``messages``. Placeholders such as
    ``{min_length}`` are filled with ``str.format``.
    """

    default_messages: ClassVar[dict[str, str]] = {
        "required": "This field is required.",
    }
    # older spellings still accepted in ``messages``
    message_aliases: ClassVar[dict[str, str]] = {}

    def __init__(self, required: bool = True, messages: dict[str, str] | None = None):
        self.required = required
        overrides = {self.message_aliases.get(key, key): text for key, text in (messages or {}).items()}
        self.messages = {**self.default_messages, **overrides}
        self.field: AbstractFormField | None = None

    def bind(self, field: AbstractFormField) -> None:
        """Called when the validator is attached to ``field``."""
        self.field = field

    def fail(self, key: str, **params: Any) -> NoReturn:
        message = self.messages[key]
        if params:
            message = message.format(**params)
        raise ValidationError(message, code=key)

    def validate(self, field: AbstractFormField) -> None:
        raise NotImplementedError

    @staticmethod
    def is_empty(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return value.strip() == ""
        if isinstance(value, (list, tuple, set, dict)):
            return len(value) == 0
        return False

    def check_required(self, value: Any) -> bool:
        """Return True when the value is present and further checks should run."""
        if self.is_empty(value):
            if self.required:
                self.fail("required")
            return False
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(required={self.required!r})"
