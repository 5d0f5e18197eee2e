from formhandler.validators.base import AbstractValidator
from formhandler.validators.csrf import CsrfValidator
from formhandler.validators.upload import ImageUploadValidator, UploadValidator
from formhandler.validators.values import FunctionValidator, NumberValidator, RegexValidator, StringValidator

__all__ = [
    "AbstractValidator",
    "CsrfValidator",
    "FunctionValidator",
    "ImageUploadValidator",
    "NumberValidator",
    "RegexValidator",
    "StringValidator",
    "UploadValidator",
]
