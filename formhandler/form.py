"""The Form: field container, submission tracking, validation and rendering."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, ClassVar

from markupsafe import Markup

from formhandler.config import Settings, get_settings
from formhandler.csrf import CsrfTokenStore
from formhandler.exceptions import FormHandlerError
from formhandler.fields.base import AbstractFormField
from formhandler.fields.buttons import AbstractFormButton, Button, ImageButton, ResetButton, SubmitButton
from formhandler.fields.choice import CheckBox, RadioButton, SelectField
from formhandler.fields.element import Element
from formhandler.fields.text import HiddenField, PassField, TextArea, TextField
from formhandler.fields.upload import UploadField
from formhandler.html import render_attrs, tag
from formhandler.submission import Submission
from formhandler.template import Template
from formhandler.validators.csrf import CsrfValidator

logger = logging.getLogger(__name__)

MULTIPART = "multipart/form-data"


class Form(Element):
    """A form bound to one request.

    Usage:
        submission = await load_submission(request)
        form = Form(submission, action="/contact")
        form.text_field("name").add_validator(StringValidator(2))
        form.submit_button("Send")

        if form.is_valid():
            data = form.get_data()
        else:
            # render again, fields keep the submitted values and errors
            html = form.render()

    CSRF protection adds a hidden ``csrftoken`` field holding a session
    token. It is on by default (see :meth:`set_default_csrf_protection`)
    and silently off when the submission carries no session.
    """

    _default_csrf_protection: ClassVar[bool | None] = None

    def __init__(
        self,
        submission: Submission | None = None,
        action: str = "",
        csrf_protection: bool | None = None,
        *,
        name: str | None = None,
        method: str = "post",
        enctype: str | None = None,
        accept_charset: str | None = None,
        settings: Settings | None = None,
        **element_kwargs: Any,
    ):
        super().__init__(**element_kwargs)
        self.settings = settings or get_settings()
        self.submission = submission or Submission.empty()
        self.action = action
        self.name = name
        self.method = method.upper()
        self.accept_charset = accept_charset
        self._enctype = enctype

        self.fields: list[AbstractFormField | AbstractFormButton] = []
        self.not_submitted_reason: str | None = None
        self._submitted: bool | None = None
        self._valid: bool | None = None
        self._csrf_enabled = False
        self._csrf_store: CsrfTokenStore | None = None

        if csrf_protection is None:
            csrf_protection = self.is_default_csrf_protection_enabled()
        self.set_csrf_protection(csrf_protection)

    # -- Class wide CSRF default --

    @classmethod
    def set_default_csrf_protection(cls, enabled: bool | None) -> None:
        """Set the CSRF default for new forms. ``None`` falls back to settings."""
        Form._default_csrf_protection = enabled

    @classmethod
    def is_default_csrf_protection_enabled(cls) -> bool:
        if Form._default_csrf_protection is None:
            return get_settings().csrf.enabled
        return Form._default_csrf_protection

    # -- CSRF --

    @property
    def csrf_protection_enabled(self) -> bool:
        return self._csrf_enabled

    @property
    def csrf_field_name(self) -> str:
        return self.settings.csrf.field_name

    @property
    def csrf_store(self) -> CsrfTokenStore | None:
        if self._csrf_store is None and self.submission.session is not None:
            self._csrf_store = CsrfTokenStore(self.submission.session, settings=self.settings)
        return self._csrf_store

    @property
    def csrf_field(self) -> HiddenField | None:
        if not self._csrf_enabled:
            return None
        return self.get_field(self.csrf_field_name)

    def set_csrf_protection(self, enabled: bool) -> None:
        if enabled and self.submission.session is None:
            logger.debug("No session available, CSRF protection disabled for form %r", self.name)
            enabled = False

        self._csrf_enabled = enabled
        if not enabled:
            self.remove_field(self.csrf_field_name)
        elif self.get_field(self.csrf_field_name) is None:
            store = self.csrf_store
            field = HiddenField(self, self.csrf_field_name)
            # a GET form is "posted" on every page view, so only a sent token counts there
            if not self.is_posted() or (
                self.method == "GET" and not self.submission.has(self.csrf_field_name)
            ):
                field.value = store.issue()
            field.add_validator(CsrfValidator(store))

        self.clear_cache()

    def is_csrf_valid(self) -> bool:
        """True unless the form was submitted with a bad or missing token."""
        if not self._csrf_enabled or not self.is_submitted():
            return True
        return self.csrf_field.is_valid()

    # -- Fields --

    def add_field(self, field: AbstractFormField | AbstractFormButton) -> None:
        if (
            isinstance(field, AbstractFormField)
            and not isinstance(field, RadioButton)
            and self.get_field(field.name) is not None
        ):
            raise FormHandlerError(f"Form already has a field named {field.name!r}")
        self.fields.append(field)
        self.clear_cache()

    def remove_field(self, name: str) -> None:
        self.fields = [field for field in self.fields if field.name != name]
        self.clear_cache()

    def get_field(self, name: str) -> AbstractFormField | AbstractFormButton | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def value_fields(self) -> list[AbstractFormField]:
        return [field for field in self.fields if isinstance(field, AbstractFormField)]

    def buttons(self) -> list[AbstractFormButton]:
        return [field for field in self.fields if isinstance(field, AbstractFormButton)]

    def __call__(self, name: str) -> AbstractFormField | AbstractFormButton | None:
        return self.get_field(name)

    def __getitem__(self, name: str) -> AbstractFormField | AbstractFormButton:
        field = self.get_field(name)
        if field is None:
            raise KeyError(name)
        return field

    def __contains__(self, name: str) -> bool:
        return self.get_field(name) is not None

    def __iter__(self) -> Iterator[AbstractFormField | AbstractFormButton]:
        return iter(list(self.fields))

    def __len__(self) -> int:
        return len(self.fields)

    # -- Field factories --

    def text_field(self, name: str, **kwargs: Any) -> TextField:
        return TextField(self, name, **kwargs)

    def password_field(self, name: str, **kwargs: Any) -> PassField:
        return PassField(self, name, **kwargs)

    def hidden_field(self, name: str, **kwargs: Any) -> HiddenField:
        return HiddenField(self, name, **kwargs)

    def text_area(self, name: str, **kwargs: Any) -> TextArea:
        return TextArea(self, name, **kwargs)

    def check_box(self, name: str, checked_value: str = "1", **kwargs: Any) -> CheckBox:
        return CheckBox(self, name, checked_value=checked_value, **kwargs)

    def radio_button(self, name: str, radio_value: str, **kwargs: Any) -> RadioButton:
        return RadioButton(self, name, radio_value, **kwargs)

    def select_field(self, name: str, options=None, **kwargs: Any) -> SelectField:
        return SelectField(self, name, options, **kwargs)

    def upload_field(self, name: str, **kwargs: Any) -> UploadField:
        return UploadField(self, name, **kwargs)

    def submit_button(self, value: str = "Submit", name: str | None = None, **kwargs: Any) -> SubmitButton:
        return SubmitButton(self, value, name, **kwargs)

    def reset_button(self, value: str = "Reset", name: str | None = None, **kwargs: Any) -> ResetButton:
        return ResetButton(self, value, name, **kwargs)

    def button(self, label: str, name: str | None = None, **kwargs: Any) -> Button:
        return Button(self, label, name, **kwargs)

    def image_button(self, src: str, name: str | None = None, **kwargs: Any) -> ImageButton:
        return ImageButton(self, src, name, **kwargs)

    # -- Submission state --

    def is_posted(self) -> bool:
        """True if the request used this form's method."""
        return self.submission.method == self.method

    def is_submitted(self) -> bool:
        """Whether this request is a submission of this form.

        When it is not, ``not_submitted_reason`` says why.
        """
        if self._submitted is None:
            self._submitted, self.not_submitted_reason = self._check_submitted()
        return self._submitted

    def _check_submitted(self) -> tuple[bool, str | None]:
        if not self.is_posted():
            return False, (
                f"Request method {self.submission.method} does not match "
                f"form method {self.method}"
            )

        if self._csrf_enabled and not self.submission.has(self.csrf_field_name):
            return False, "The CSRF token was not submitted"

        expected = [
            field
            for field in self.value_fields()
            if field.always_posted and not field.disabled and field.name != self.csrf_field_name
        ]
        if expected and not any(self.submission.has(field.name) for field in expected):
            return False, "None of the form's fields were submitted"

        return True, None

    def is_valid(self) -> bool:
        """Submitted and every field valid. A valid submission uses up its CSRF token."""
        if self._valid is None:
            if not self.is_submitted():
                logger.debug("Form %r not submitted: %s", self.name, self.not_submitted_reason)
                self._valid = False
                return False

            # validate every field so each one collects its messages
            results = [field.is_valid() for field in self.value_fields()]
            self._valid = all(results)

            if self._valid and self._csrf_enabled:
                self.csrf_store.consume(self.csrf_field.value)

        return self._valid

    def clear_cache(self) -> None:
        """Forget submission and validation results so they are computed again."""
        self._submitted = None
        self._valid = None
        self.not_submitted_reason = None
        for field in self.value_fields():
            field.clear_cache()

    # -- Data --

    def get_data(self) -> dict[str, Any]:
        """Field values by name, without the CSRF token."""
        data: dict[str, Any] = {}
        for field in self.value_fields():
            if field.name == self.csrf_field_name:
                continue
            if isinstance(field, RadioButton):
                if field.checked:
                    data[field.name] = field.value
                else:
                    data.setdefault(field.name, None)
                continue
            data[field.name] = field.value
        return data

    @property
    def errors(self) -> dict[str, list[str]]:
        """Messages of the fields found invalid so far."""
        return {
            field.name: list(field.error_messages)
            for field in self.value_fields()
            if field.error_messages
        }

    @property
    def form_error(self) -> str | None:
        """Non-field error (CSRF failure)."""
        field = self.csrf_field
        if field is not None and field.error_messages:
            return field.error_messages[0]
        return None

    # -- Rendering --

    @property
    def enctype(self) -> str | None:
        if self._enctype:
            return self._enctype
        if any(isinstance(field, UploadField) for field in self.fields):
            return MULTIPART
        return None

    @enctype.setter
    def enctype(self, value: str | None) -> None:
        self._enctype = value

    def form_attrs(self) -> dict[str, Any]:
        attrs = {
            "action": self.action,
            "method": self.method.lower(),
            "name": self.name,
        }
        attrs.update(self.base_attrs())
        attrs.update({"enctype": self.enctype, "accept-charset": self.accept_charset})
        return attrs

    def open_tag(self) -> Markup:
        return Markup(f"<form{render_attrs(self.form_attrs())}>")

    def render_field(self, name: str) -> Markup:
        """Render a single field group (label + widget + errors)."""
        field = self[name]
        if isinstance(field, AbstractFormField):
            return field.render_group()
        return field.render()

    def render(self, template_engine=None) -> Markup:
        """Render the form.

        With a template engine the hierarchy form-{name}.html -> form.html
        is tried first, the programmatic rendering is the fallback.
        """
        if template_engine is not None:
            rendered = Template("form", self.name or "").try_render(template_engine, form=self)
            if rendered is not None:
                return Markup(rendered)
        return self._render_default()

    def _render_default(self) -> Markup:
        lines = [str(self.open_tag())]

        hidden = [field for field in self.value_fields() if isinstance(field, HiddenField)]
        visible = [field for field in self.value_fields() if not isinstance(field, HiddenField)]

        lines.extend(str(field.render()) for field in hidden)
        if self.form_error:
            lines.append(str(tag("article", {"role": "alert"}, self.form_error)))
        lines.extend(str(field.render_group()) for field in visible)
        lines.extend(str(button.render()) for button in self.buttons())

        lines.append("</form>")
        return Markup("\n".join(lines))

    def __repr__(self) -> str:
        return f"Form(name={self.name!r}, method={self.method!r}, fields={[f.name for f in self.fields]!r})"
