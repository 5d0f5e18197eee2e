"""Checkboxes, radio buttons and select lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from markupsafe import Markup

from formhandler.fields.base import AbstractFormField
from formhandler.fields.element import Element
from formhandler.html import tag


class CheckBox(AbstractFormField):
    """A single checkbox. Its value is ``checked_value`` when ticked, else None."""

    always_posted = False

    def __init__(self, form, name: str, *, checked_value: str = "1", checked: bool = False, **kwargs: Any):
        kwargs.setdefault("default", checked_value if checked else None)
        super().__init__(form, name, **kwargs)
        self.checked_value = checked_value

    def submitted_value(self) -> str | None:
        if self.checked_value in self.form.submission.getlist(self.name):
            return self.checked_value
        return None

    @property
    def checked(self) -> bool:
        value = self.value
        if isinstance(value, list):
            return self.checked_value in value
        return value is not None and str(value) == self.checked_value

    def render(self) -> Markup:
        attrs = {"type": "checkbox", "name": self.name, "value": self.checked_value}
        attrs.update(self.base_attrs())
        attrs.update({"checked": self.checked, "disabled": self.disabled, "required": self.is_required})
        return tag("input", attrs)


class RadioButton(AbstractFormField):
    """One option of a radio group. Radios of a group share ``name``."""

    always_posted = False

    def __init__(self, form, name: str, radio_value: str, *, checked: bool = False, **kwargs: Any):
        kwargs.setdefault("default", radio_value if checked else None)
        super().__init__(form, name, **kwargs)
        self.radio_value = radio_value

    @property
    def html_id(self) -> str:
        return self.id or f"field-{self.name}-{self.radio_value}"

    @property
    def checked(self) -> bool:
        return self.value is not None and str(self.value) == self.radio_value

    def render(self) -> Markup:
        attrs = {"type": "radio", "name": self.name, "value": self.radio_value}
        attrs.update(self.base_attrs())
        attrs.update({"checked": self.checked, "disabled": self.disabled, "required": self.is_required})
        return tag("input", attrs)


class Option(Element):
    def __init__(
        self,
        value: Any,
        label: str | None = None,
        *,
        selected: bool = False,
        disabled: bool = False,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.value = str(value)
        self.label = self.value if label is None else label
        self.selected = selected
        self.disabled = disabled

    def render(self, selected: bool | None = None) -> Markup:
        attrs = {"value": self.value}
        attrs.update(self.base_attrs())
        attrs.update({
            "selected": self.selected if selected is None else selected,
            "disabled": self.disabled,
        })
        return tag("option", attrs, self.label)

    def __repr__(self) -> str:
        return f"Option({self.value!r}, {self.label!r})"


def _options_from_mapping(options: Mapping[Any, str]) -> list[Option]:
    return [Option(value, label) for value, label in options.items()]


class Optgroup(Element):
    """A labelled group of options inside a select list."""

    def __init__(self, label: str, options: Iterable[Option] | None = None, *, disabled: bool = False, **kwargs: Any):
        super().__init__(**kwargs)
        self.label = label
        self.disabled = disabled
        self.options: list[Option] = list(options or [])

    def add_option(self, option: Option):
        self.options.append(option)
        return self

    def add_options(self, options: Iterable[Option]):
        self.options.extend(options)
        return self

    def set_options(self, options: Iterable[Option]):
        self.options = list(options)
        return self

    def set_options_from_dict(self, options: Mapping[Any, str]):
        """Replace the options with one ``Option(value, label)`` per mapping item."""
        return self.set_options(_options_from_mapping(options))

    def add_options_from_dict(self, options: Mapping[Any, str]):
        return self.add_options(_options_from_mapping(options))

    def render(self, selected_values: set[str] | None = None) -> Markup:
        attrs = {"label": self.label}
        attrs.update(self.base_attrs())
        attrs["disabled"] = self.disabled
        inner = Markup("").join(_render_option(option, selected_values) for option in self.options)
        return tag("optgroup", attrs, inner)


def _render_option(option: Option, selected_values: set[str] | None) -> Markup:
    if selected_values is None:
        return option.render()
    return option.render(selected=option.value in selected_values)


class SelectField(AbstractFormField):
    """``<select>`` holding options and optgroups, optionally multiple."""

    def __init__(
        self,
        form,
        name: str,
        options: Iterable[Option | Optgroup] | Mapping[Any, str] | None = None,
        *,
        multiple: bool = False,
        size: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(form, name, **kwargs)
        self.multiple = multiple
        self.size = size
        self.options: list[Option | Optgroup] = []
        if isinstance(options, Mapping):
            self.add_options_from_dict(options)
        elif options:
            self.add_options(options)

    @property
    def multi_valued(self) -> bool:
        return self.multiple

    @property
    def always_posted(self) -> bool:
        return not self.multiple

    def submitted_value(self) -> str | list[str] | None:
        if self.multiple:
            return self.form.submission.getlist(self.name)
        return super().submitted_value()

    # -- Options --

    def add_option(self, option: Option | Optgroup):
        self.options.append(option)
        return self

    def add_options(self, options: Iterable[Option | Optgroup]):
        self.options.extend(options)
        return self

    def set_options(self, options: Iterable[Option | Optgroup]):
        self.options = list(options)
        return self

    def set_options_from_dict(self, options: Mapping[Any, str]):
        return self.set_options(_options_from_mapping(options))

    def add_options_from_dict(self, options: Mapping[Any, str]):
        return self.add_options(_options_from_mapping(options))

    def iter_options(self):
        """Yield every Option, descending into optgroups."""
        for item in self.options:
            if isinstance(item, Optgroup):
                yield from item.options
            else:
                yield item

    def get_option(self, value: Any) -> Option | None:
        value = str(value)
        for option in self.iter_options():
            if option.value == value:
                return option
        return None

    def selected_values(self) -> set[str]:
        value = self.value
        if value is None:
            return {option.value for option in self.iter_options() if option.selected}
        if isinstance(value, (list, tuple, set)):
            return {str(v) for v in value}
        return {str(value)}

    def render(self) -> Markup:
        attrs = {"name": self.name}
        attrs.update(self.base_attrs())
        attrs.update({
            "multiple": self.multiple,
            "size": self.size,
            "disabled": self.disabled,
            "required": self.is_required,
        })
        selected = self.selected_values()
        inner = Markup("").join(
            item.render(selected) if isinstance(item, Optgroup) else _render_option(item, selected)
            for item in self.options
        )
        return tag("select", attrs, inner)
