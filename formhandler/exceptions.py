"""Exceptions raised by formhandler."""


class FormHandlerError(Exception):
    """Base class for all formhandler errors."""


class ValidationError(FormHandlerError):
    """Raised by a validator when a field value is rejected.

    ``code`` is the message key the validator used (e.g. ``"required"``),
    so callers can tell failures apart without parsing the message.
    """

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidValidatorError(FormHandlerError):
    """Raised when a validator is attached to a field it cannot check."""
