"""Session backed CSRF token store.

Tokens look like ``<unix timestamp>.<random>`` and live as a list in the
session, so a user can have several forms open at once. The timestamp
prefix lets stale tokens be purged without any other bookkeeping.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import time
from collections.abc import MutableMapping
from typing import Any

from formhandler.config import Settings, get_settings

logger = logging.getLogger(__name__)


def generate_token() -> str:
    return f"{int(time.time())}.{secrets.token_urlsafe(32)}"


def _same_token(a: str, b: str) -> bool:
    # compare_digest only accepts ASCII str, posted tokens may be anything
    return hmac.compare_digest(a.encode(), b.encode())


class CsrfTokenStore:
    """The CSRF tokens of one session. Purges stale tokens on creation."""

    def __init__(
        self,
        session: MutableMapping[str, Any],
        *,
        expire: int | None = None,
        session_key: str | None = None,
        max_tokens: int | None = None,
        settings: Settings | None = None,
    ):
        config = (settings or get_settings()).csrf
        self.session = session
        self.expire = config.expire if expire is None else expire
        self.session_key = session_key or config.session_key
        self.max_tokens = config.max_tokens if max_tokens is None else max_tokens
        self.cleanup()

    @property
    def tokens(self) -> list[str]:
        return list(self.session.get(self.session_key) or [])

    def _is_fresh(self, token: Any, now: int) -> bool:
        if not isinstance(token, str):
            return False
        stamp, sep, _ = token.partition(".")
        if not sep or not (stamp.isascii() and stamp.isdigit()):
            return False
        return int(stamp) + self.expire >= now

    def _store(self, tokens: list[str]) -> None:
        if self.max_tokens and len(tokens) > self.max_tokens:
            tokens = tokens[-self.max_tokens:]
        # reassign so session backends notice the change
        self.session[self.session_key] = tokens

    def cleanup(self) -> None:
        """Drop malformed and expired tokens, and reset a non-list entry."""
        stored = self.session.get(self.session_key)
        if not isinstance(stored, list):
            stored = []

        now = int(time.time())
        kept = [token for token in stored if self._is_fresh(token, now)]
        if len(kept) != len(stored):
            logger.debug("Purged %d stale CSRF token(s)", len(stored) - len(kept))
        self._store(kept)

    def issue(self) -> str:
        token = generate_token()
        self._store(self.tokens + [token])
        return token

    def __contains__(self, token: Any) -> bool:
        if not token or not isinstance(token, str):
            return False
        if not self._is_fresh(token, int(time.time())):
            return False
        return any(_same_token(token, stored) for stored in self.tokens)

    def consume(self, token: str) -> bool:
        """Remove ``token`` so it cannot be used again. Returns whether it existed."""
        if token not in self:
            return False
        self._store([stored for stored in self.tokens if not _same_token(token, stored)])
        return True

    def __len__(self) -> int:
        return len(self.tokens)
