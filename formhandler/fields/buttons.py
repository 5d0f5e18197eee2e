"""Form buttons. Buttons carry no value and are never validated."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from formhandler.fields.element import Element
from formhandler.html import tag

if TYPE_CHECKING:
    from formhandler.form import Form


class AbstractFormButton(Element):
    def __init__(
        self,
        form: Form | None,
        name: str | None = None,
        *,
        disabled: bool = False,
        size: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.form = form
        self.name = name
        self.disabled = disabled
        self.size = size
        if form is not None:
            form.add_field(self)

    def button_attrs(self, type: str) -> dict[str, Any]:
        attrs = {"type": type, "name": self.name}
        attrs.update(self.base_attrs())
        attrs.update({"size": self.size, "disabled": self.disabled})
        return attrs

    def was_clicked(self) -> bool:
        """True if the submission came from this (named) button."""
        if self.form is None or not self.name:
            return False
        submission = self.form.submission
        return submission.has(self.name) or submission.has(f"{self.name}.x")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SubmitButton(AbstractFormButton):
    def __init__(self, form, value: str = "Submit", name: str | None = None, **kwargs: Any):
        super().__init__(form, name, **kwargs)
        self.value = value

    def render(self) -> Markup:
        attrs = self.button_attrs("submit")
        attrs["value"] = self.value
        return tag("input", attrs)


class ResetButton(AbstractFormButton):
    def __init__(self, form, value: str = "Reset", name: str | None = None, **kwargs: Any):
        super().__init__(form, name, **kwargs)
        self.value = value

    def render(self) -> Markup:
        attrs = self.button_attrs("reset")
        attrs["value"] = self.value
        return tag("input", attrs)


class Button(AbstractFormButton):
    """``<button>`` element whose content is ``label``."""

    def __init__(self, form, label: str, name: str | None = None, *, type: str = "button", value: str | None = None, **kwargs: Any):
        super().__init__(form, name, **kwargs)
        self.label = label
        self.type = type
        self.value = value

    def render(self) -> Markup:
        attrs = self.button_attrs(self.type)
        attrs["value"] = self.value
        return tag("button", attrs, self.label)


class ImageButton(AbstractFormButton):
    """Graphical submit button. Browsers post the click position as name.x/name.y."""

    def __init__(self, form, src: str, name: str | None = None, *, alt: str = "", **kwargs: Any):
        super().__init__(form, name, **kwargs)
        self.src = src
        self.alt = alt

    def render(self) -> Markup:
        attrs = self.button_attrs("image")
        attrs.update({"src": self.src, "alt": self.alt})
        return tag("input", attrs)
