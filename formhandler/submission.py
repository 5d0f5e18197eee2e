"""Snapshot of the request data a form is checked against."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.datastructures import UploadFile
from litestar.exceptions import ImproperlyConfiguredException

from formhandler.config import Settings, get_settings
from formhandler.uploads import UploadedFile

if TYPE_CHECKING:
    from litestar import Request

logger = logging.getLogger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
MAX_FILE_SIZE_FIELD = "MAX_FILE_SIZE"


@dataclass
class Submission:
    """Request method, posted values, uploads and session of one request.

    ``session`` is ``None`` when the runtime has no session support, in
    which case CSRF protection cannot work and is switched off by forms.
    """

    method: str = "GET"
    data: dict[str, str | list[str]] = field(default_factory=dict)
    files: dict[str, UploadedFile] = field(default_factory=dict)
    session: MutableMapping[str, Any] | None = None

    def __post_init__(self):
        self.method = self.method.upper()

    @classmethod
    def empty(cls) -> Submission:
        return cls()

    def has(self, name: str) -> bool:
        return name in self.data or name in self.files

    def get(self, name: str, default: Any = None) -> str | list[str] | None:
        return self.data.get(name, default)

    def getlist(self, name: str) -> list[str]:
        value = self.data.get(name)
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]


def _multi_items(mapping) -> list[tuple[str, Any]]:
    multi_items = getattr(mapping, "multi_items", None)
    if multi_items is not None:
        return list(multi_items())
    return list(mapping.items())


def _session_or_none(request: Request) -> MutableMapping[str, Any] | None:
    try:
        return request.session
    except ImproperlyConfiguredException:
        logger.debug("No session middleware installed, CSRF tokens cannot be stored")
        return None


async def load_submission(request: Request, settings: Settings | None = None) -> Submission:
    """Read a Litestar request into a :class:`Submission`.

    Body methods read the (urlencoded or multipart) form body, other
    methods read the query string. Keys repeated in the request become
    lists and a trailing ``[]`` is stripped from names.
    """
    settings = settings or get_settings()
    method = request.method.upper()

    if method in BODY_METHODS:
        raw = await request.form()
    else:
        raw = request.query_params

    data: dict[str, str | list[str]] = {}
    uploads: dict[str, UploadFile] = {}
    for key, value in _multi_items(raw):
        is_list = key.endswith("[]")
        name = key[:-2] if is_list else key

        if isinstance(value, UploadFile):
            # one file per field, the first part wins
            uploads.setdefault(name, value)
            continue

        value = str(value)
        if name not in data:
            data[name] = [value] if is_list else value
        else:
            existing = data[name]
            data[name] = (existing if isinstance(existing, list) else [existing]) + [value]

    form_max_size = None
    posted_max = data.get(MAX_FILE_SIZE_FIELD)
    if isinstance(posted_max, str) and posted_max.isascii() and posted_max.isdigit():
        form_max_size = int(posted_max)

    files = {
        name: UploadedFile.from_upload(
            upload,
            max_size=settings.uploads.max_size,
            form_max_size=form_max_size,
        )
        for name, upload in uploads.items()
    }

    return Submission(
        method=method,
        data=data,
        files=files,
        session=_session_or_none(request),
    )
