"""Base class for value carrying form fields."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from markupsafe import Markup, escape

from formhandler.exceptions import ValidationError
from formhandler.fields.element import Element
from formhandler.html import tag

if TYPE_CHECKING:
    from formhandler.form import Form
    from formhandler.validators.base import AbstractValidator

logger = logging.getLogger(__name__)


class AbstractFormField(Element):
    """A named field whose value comes from the submission or a default.

    The value is resolved in this order: a value assigned explicitly, the
    submitted value when the request uses the form's method, the default.
    Disabled fields ignore submitted values, browsers never post them.
    """

    # Browsers send this field whenever its form is posted
    always_posted: ClassVar[bool] = True
    # Whether the field keeps every submitted value instead of the first
    multi_valued: ClassVar[bool] = False

    def __init__(
        self,
        form: Form | None,
        name: str,
        *,
        label: str | None = None,
        help_text: str | None = None,
        default: Any = None,
        disabled: bool = False,
        readonly: bool = False,
        required: bool = False,
        **element_kwargs: Any,
    ):
        super().__init__(**element_kwargs)
        self.form = form
        self.name = name
        self.label = label
        self.help_text = help_text
        self.default = default
        self.disabled = disabled
        self.readonly = readonly
        self.required = required

        self.validators: list[AbstractValidator] = []
        self.error_messages: list[str] = []
        self._value: Any = None
        self._value_set = False
        self._valid: bool | None = None

        if form is not None:
            form.add_field(self)

    # -- Value --

    @property
    def value(self) -> Any:
        if self._value_set:
            return self._value
        if self.form is not None and not self.disabled and self.form.is_posted():
            return self.submitted_value()
        return self.default

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value
        self._value_set = True
        self.clear_cache()

    def submitted_value(self) -> Any:
        value = self.form.submission.get(self.name)
        if isinstance(value, list) and not self.multi_valued:
            return value[0] if value else None
        return value

    @property
    def html_id(self) -> str:
        return self.id or f"field-{self.name}"

    @property
    def is_required(self) -> bool:
        return self.required or any(v.required for v in self.validators)

    # -- Validation --

    def add_validator(self, validator: AbstractValidator):
        validator.bind(self)
        self.validators.append(validator)
        self.clear_cache()
        return self

    def set_validator(self, validator: AbstractValidator):
        """Replace all validators with ``validator``."""
        validator.bind(self)
        self.validators = [validator]
        self.clear_cache()
        return self

    def is_valid(self) -> bool:
        if self._valid is None:
            self.error_messages = []
            for validator in self.validators:
                try:
                    validator.validate(self)
                except ValidationError as e:
                    logger.debug("Field %r rejected (%s): %s", self.name, e.code, e.message)
                    self.error_messages.append(e.message)
                    break
            self._valid = not self.error_messages
        return self._valid

    def set_error_message(self, message: str, append: bool = False) -> None:
        """Mark the field invalid with ``message``.

        With ``append`` the message is added to those produced by the
        validators, otherwise it replaces them.
        """
        self.is_valid()
        if append:
            self.error_messages.append(message)
        else:
            self.error_messages = [message]
        self._valid = False

    def clear_cache(self) -> None:
        self._valid = None
        self.error_messages = []

    # -- Rendering --

    def base_attrs(self) -> dict[str, Any]:
        attrs = super().base_attrs()
        attrs["id"] = self.html_id
        return attrs

    def label_tag(self) -> Markup:
        text = self.label if self.label is not None else self.name.replace("_", " ").title()
        req = Markup(' <span class="required">*</span>') if self.is_required else ""
        return Markup(f'<label for="{escape(self.html_id)}">{escape(text)}{req}</label>')

    def render_errors(self) -> Markup:
        return Markup("").join(
            tag("small", {"class": "error"}, message) for message in self.error_messages
        )

    def render_group(self) -> Markup:
        """Render label + widget + errors + help text as one group."""
        html = str(self.label_tag()) + "\n" + str(self.render())
        if self.error_messages:
            html += "\n" + str(self.render_errors())
        if self.help_text:
            html += "\n" + str(tag("small", {"class": "text-muted"}, self.help_text))
        return Markup(html)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, value={self.value!r})"
