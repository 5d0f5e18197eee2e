from __future__ import annotations

import logging

from formhandler.csrf import CsrfTokenStore
from formhandler.validators.base import AbstractValidator

logger = logging.getLogger(__name__)


class CsrfValidator(AbstractValidator):
    """Accepts the field value only if it is a live token of the session."""

    default_messages = {
        "required": "Form session expired. Please try again.",
        "invalid": "Form session expired. Please try again.",
    }

    def __init__(self, store: CsrfTokenStore, messages: dict[str, str] | None = None):
        super().__init__(True, messages)
        self.store = store

    def validate(self, field) -> None:
        token = field.value
        if not self.check_required(token):
            return

        if token not in self.store:
            logger.warning("Rejected CSRF token for field %r", field.name)
            self.fail("invalid")
