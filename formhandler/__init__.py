"""formhandler - server-side HTML forms with CSRF protection and upload validation."""

from formhandler.exceptions import FormHandlerError, InvalidValidatorError, ValidationError
from formhandler.fields import (
    AbstractFormButton,
    AbstractFormField,
    Button,
    CheckBox,
    Element,
    HiddenField,
    ImageButton,
    Optgroup,
    Option,
    PassField,
    RadioButton,
    ResetButton,
    SelectField,
    SubmitButton,
    TextArea,
    TextField,
    UploadField,
)
from formhandler.form import Form
from formhandler.model import build_form, form_to_model
from formhandler.submission import Submission, load_submission
from formhandler.uploads import UploadedFile, UploadError
from formhandler.validators import (
    AbstractValidator,
    CsrfValidator,
    FunctionValidator,
    ImageUploadValidator,
    NumberValidator,
    RegexValidator,
    StringValidator,
    UploadValidator,
)

__all__ = [
    "AbstractFormButton",
    "AbstractFormField",
    "AbstractValidator",
    "Button",
    "CheckBox",
    "CsrfValidator",
    "Element",
    "Form",
    "FormHandlerError",
    "FunctionValidator",
    "HiddenField",
    "ImageButton",
    "ImageUploadValidator",
    "InvalidValidatorError",
    "NumberValidator",
    "Optgroup",
    "Option",
    "PassField",
    "RadioButton",
    "RegexValidator",
    "ResetButton",
    "SelectField",
    "StringValidator",
    "Submission",
    "SubmitButton",
    "TextArea",
    "TextField",
    "UploadError",
    "UploadField",
    "UploadValidator",
    "UploadedFile",
    "ValidationError",
    "build_form",
    "form_to_model",
    "load_submission",
]
