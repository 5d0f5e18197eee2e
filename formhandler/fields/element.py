"""Generic HTML element with the attributes every form element shares."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup


class Element:
    """Base class for everything that renders into a form.

    Subclasses implement :meth:`render`. ``str(element)`` and Jinja's
    ``{{ element }}`` both produce the rendered HTML.
    """

    def __init__(
        self,
        *,
        id: str | None = None,
        css_class: str | None = None,
        style: str | None = None,
        title: str | None = None,
        tab_index: int | None = None,
        access_key: str | None = None,
        attributes: dict[str, Any] | None = None,
    ):
        self.id = id
        self.css_class = css_class
        self.style = style
        self.title = title
        self.tab_index = tab_index
        self.access_key = access_key
        self.attributes: dict[str, Any] = dict(attributes or {})

    def add_class(self, name: str):
        classes = (self.css_class or "").split()
        if name not in classes:
            classes.append(name)
        self.css_class = " ".join(classes)
        return self

    def set_attribute(self, name: str, value: Any):
        self.attributes[name] = value
        return self

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def base_attrs(self) -> dict[str, Any]:
        """Shared attributes in render order, followed by the extra ones."""
        attrs: dict[str, Any] = {
            "id": self.id,
            "class": self.css_class,
            "style": self.style,
            "title": self.title,
            "tabindex": self.tab_index,
            "accesskey": self.access_key,
        }
        attrs.update(self.attributes)
        return attrs

    def render(self) -> Markup:
        raise NotImplementedError

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())
