"""Text style inputs."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup

from formhandler.fields.base import AbstractFormField
from formhandler.html import tag


class TextField(AbstractFormField):
    """``<input type="text">`` and its HTML5 siblings (email, number, date...)."""

    def __init__(
        self,
        form,
        name: str,
        *,
        type: str = "text",
        size: int | None = None,
        max_length: int | None = None,
        placeholder: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(form, name, **kwargs)
        self.type = type
        self.size = size
        self.max_length = max_length
        self.placeholder = placeholder

    def submitted_value(self) -> str:
        value = super().submitted_value()
        return "" if value is None else value

    def input_attrs(self) -> dict[str, Any]:
        attrs = {
            "type": self.type,
            "name": self.name,
            "value": self.value if self.value is not None else "",
        }
        attrs.update(self.base_attrs())
        attrs.update({
            "size": self.size,
            "maxlength": self.max_length,
            "placeholder": self.placeholder,
            "disabled": self.disabled,
            "readonly": self.readonly,
            "required": self.is_required,
        })
        return attrs

    def render(self) -> Markup:
        return tag("input", self.input_attrs())


class PassField(TextField):
    """Password input. The value is never written back into the page."""

    def __init__(self, form, name: str, **kwargs: Any):
        kwargs.setdefault("type", "password")
        super().__init__(form, name, **kwargs)

    def input_attrs(self) -> dict[str, Any]:
        attrs = super().input_attrs()
        attrs["value"] = None
        return attrs


class HiddenField(TextField):
    def __init__(self, form, name: str, **kwargs: Any):
        kwargs["type"] = "hidden"
        super().__init__(form, name, **kwargs)

    def input_attrs(self) -> dict[str, Any]:
        attrs = super().input_attrs()
        attrs["required"] = None
        return attrs


class TextArea(AbstractFormField):
    def __init__(
        self,
        form,
        name: str,
        *,
        cols: int | None = None,
        rows: int | None = None,
        max_length: int | None = None,
        placeholder: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(form, name, **kwargs)
        self.cols = cols
        self.rows = rows
        self.max_length = max_length
        self.placeholder = placeholder

    def submitted_value(self) -> str:
        value = super().submitted_value()
        return "" if value is None else value

    def render(self) -> Markup:
        attrs = {"name": self.name}
        attrs.update(self.base_attrs())
        attrs.update({
            "cols": self.cols,
            "rows": self.rows,
            "maxlength": self.max_length,
            "placeholder": self.placeholder,
            "disabled": self.disabled,
            "readonly": self.readonly,
            "required": self.is_required,
        })
        return tag("textarea", attrs, self.value or "")
