from __future__ import annotations

from typing import Any

from markupsafe import Markup

from formhandler.fields.base import AbstractFormField
from formhandler.html import tag
from formhandler.uploads import UploadedFile


class UploadField(AbstractFormField):
    """``<input type="file">``. The value is the :class:`UploadedFile` or None."""

    def __init__(self, form, name: str, *, accept: str | None = None, **kwargs: Any):
        super().__init__(form, name, **kwargs)
        self.accept = accept

    def submitted_value(self) -> UploadedFile | None:
        return self.form.submission.files.get(self.name)

    def render(self) -> Markup:
        attrs = {"type": "file", "name": self.name}
        attrs.update(self.base_attrs())
        attrs.update({
            "accept": self.accept,
            "disabled": self.disabled,
            "required": self.is_required,
        })
        return tag("input", attrs)
