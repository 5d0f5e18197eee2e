"""Forms generated from, and validated into, Pydantic models."""

from __future__ import annotations

import logging
import re
import types
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from formhandler.fields.base import AbstractFormField
from formhandler.fields.choice import Option
from formhandler.form import Form
from formhandler.submission import Submission
from formhandler.uploads import UploadedFile

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

INPUT_TYPES = {
    "EmailStr": "email",
    "AnyUrl": "url",
    "HttpUrl": "url",
    "int": "number",
    "float": "number",
    "date": "date",
}


def camel_to_kebab(name: str) -> str:
    """Convert CamelCase to kebab-case. ContactUs -> contact-us"""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", name).lower()


def derive_form_name(cls: type) -> str:
    """Derive a form name from a class name, stripping 'Form' suffix."""
    name = cls.__name__
    if name.endswith("Form"):
        name = name[:-4]
    return camel_to_kebab(name)


def _unwrap_optional(annotation: Any) -> Any:
    """``X | None`` -> ``X``."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _extra(info: FieldInfo) -> dict:
    extra = info.json_schema_extra
    return extra if isinstance(extra, dict) else {}


def infer_widget(info: FieldInfo) -> str:
    """Infer widget type from a Pydantic field annotation."""
    annotation = _unwrap_optional(info.annotation)
    if annotation is bool:
        return "checkbox"
    if annotation is UploadedFile:
        return "upload"
    if getattr(annotation, "__name__", "") == "SecretStr":
        return "password"
    return "text"


def infer_input_type(info: FieldInfo) -> str:
    annotation = _unwrap_optional(info.annotation)
    return INPUT_TYPES.get(getattr(annotation, "__name__", ""), "text")


def _add_model_field(form: Form, name: str, info: FieldInfo) -> AbstractFormField:
    extra = _extra(info)
    required = info.is_required()
    default = None if required else info.get_default(call_default_factory=True)

    common: dict[str, Any] = {
        "label": extra.get("label"),
        "help_text": extra.get("help_text"),
        "attributes": dict(extra.get("attrs", {})),
    }

    widget = extra.get("widget") or infer_widget(info)

    if widget == "checkbox":
        return form.check_box(name, checked=bool(default), **common)
    if widget == "upload":
        return form.upload_field(name, accept=extra.get("accept"), required=required, **common)
    if widget == "textarea":
        return form.text_area(name, default=default, required=required, **common)
    if widget == "select":
        options = [Option(value, label) for value, label in extra.get("choices", [])]
        return form.select_field(name, options, default=default, required=required, **common)
    if widget == "hidden":
        return form.hidden_field(name, default=default, **common)
    if widget == "password":
        return form.password_field(name, required=required, **common)

    input_type = extra.get("input_type") or infer_input_type(info)
    return form.text_field(name, type=input_type, default=default, required=required, **common)


def build_form(
    model: type[BaseModel],
    submission: Submission | None = None,
    *,
    submit_label: str = "Submit",
    **form_kwargs: Any,
) -> Form:
    """Create a form with one field per model field, plus a submit button.

    Field rendering is steered through ``json_schema_extra``: ``label``,
    ``help_text``, ``widget`` (textarea, select, hidden, password, upload,
    checkbox), ``choices`` for selects, ``input_type`` and ``attrs``.
    The form name defaults to the kebab-cased model name without a "Form"
    suffix, a ``form_name`` ClassVar on the model overrides it.
    """
    form_kwargs.setdefault("name", getattr(model, "form_name", None) or derive_form_name(model))
    form = Form(submission, **form_kwargs)
    for name, info in model.model_fields.items():
        _add_model_field(form, name, info)
    form.submit_button(submit_label)
    return form


def form_to_model(form: Form, model: type[T]) -> T | None:
    """Validate a submitted form into ``model``.

    Returns the model instance, or None when the form is not submitted or
    invalid. Pydantic errors are attached to the matching fields, keeping
    the first error per field.
    """
    if not form.is_submitted():
        return None

    data: dict[str, Any] = {}
    for name, value in form.get_data().items():
        info = model.model_fields.get(name)
        if info is None:
            continue
        if value is None or (value == "" and not info.is_required()):
            continue
        if isinstance(value, UploadedFile) and value.is_empty:
            continue
        data[name] = value

    # Unchecked checkboxes are not posted
    for name, info in model.model_fields.items():
        if _unwrap_optional(info.annotation) is bool and name not in data:
            data[name] = False

    instance = None
    try:
        instance = model(**data)
    except ValidationError as e:
        seen: set[str] = set()
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else ""
            if name in seen:
                continue
            seen.add(name)
            field = form.get_field(name)
            if not isinstance(field, AbstractFormField):
                logger.warning("Model error for %r has no matching form field: %s", name, err["msg"])
                continue
            if field.is_valid():
                field.set_error_message(err["msg"])

    if not form.is_valid() or instance is None:
        return None
    return instance
