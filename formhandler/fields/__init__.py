from formhandler.fields.base import AbstractFormField
from formhandler.fields.buttons import AbstractFormButton, Button, ImageButton, ResetButton, SubmitButton
from formhandler.fields.choice import CheckBox, Optgroup, Option, RadioButton, SelectField
from formhandler.fields.element import Element
from formhandler.fields.text import HiddenField, PassField, TextArea, TextField
from formhandler.fields.upload import UploadField

__all__ = [
    "AbstractFormButton",
    "AbstractFormField",
    "Button",
    "CheckBox",
    "Element",
    "HiddenField",
    "ImageButton",
    "Optgroup",
    "Option",
    "PassField",
    "RadioButton",
    "ResetButton",
    "SelectField",
    "SubmitButton",
    "TextArea",
    "TextField",
    "UploadField",
]
