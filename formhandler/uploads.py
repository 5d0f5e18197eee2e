"""Uploaded file model and content type detection."""

from __future__ import annotations

import io
import logging
import mimetypes
import shutil
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from PIL import Image, UnidentifiedImageError

if TYPE_CHECKING:
    from litestar.datastructures import UploadFile

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# (offset, signature, content type), checked in order
_SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
]


class UploadError(IntEnum):
    """Upload status, numbered like the classic CGI upload error codes."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


@dataclass
class UploadedFile:
    """A file received with a form submission."""

    filename: str
    content_type: str = DEFAULT_CONTENT_TYPE
    size: int = 0
    file: BinaryIO | None = None
    error: UploadError = UploadError.OK

    @property
    def extension(self) -> str:
        """Lower case extension without the dot, empty if the name has none."""
        suffix = Path(self.filename).suffix
        return suffix[1:].lower() if suffix else ""

    @property
    def is_empty(self) -> bool:
        return self.error == UploadError.NO_FILE

    def head(self, length: int = 2048) -> bytes:
        """Return the first bytes of the file, leaving the stream where it was."""
        if self.file is None:
            return b""
        position = self.file.tell()
        try:
            self.file.seek(0)
            return self.file.read(length)
        finally:
            self.file.seek(position)

    def save(self, destination: str | Path) -> Path:
        """Copy the upload to ``destination`` and return the written path."""
        if self.file is None or self.error != UploadError.OK:
            raise ValueError(f"Cannot save upload {self.filename!r}: {self.error.name}")

        path = Path(destination)
        if path.is_dir():
            path = path / Path(self.filename).name

        self.file.seek(0)
        with open(path, "wb") as out:
            shutil.copyfileobj(self.file, out)
        self.file.seek(0)
        return path

    @classmethod
    def from_bytes(cls, filename: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> UploadedFile:
        """Build an in-memory upload, mostly useful outside a request cycle."""
        return cls(
            filename=filename,
            content_type=content_type,
            size=len(data),
            file=io.BytesIO(data),
        )

    @classmethod
    def from_upload(
        cls,
        upload: UploadFile,
        max_size: int | None = None,
        form_max_size: int | None = None,
    ) -> UploadedFile:
        """Convert a Litestar ``UploadFile``, flagging size and empty uploads."""
        filename = upload.filename or ""
        content_type = upload.content_type or DEFAULT_CONTENT_TYPE

        if not filename:
            return cls(filename="", content_type=content_type, error=UploadError.NO_FILE)

        try:
            upload.file.seek(0, io.SEEK_END)
            size = upload.file.tell()
            upload.file.seek(0)
        except OSError:
            logger.exception("Could not read uploaded file %r", filename)
            return cls(filename=filename, content_type=content_type, error=UploadError.CANT_WRITE)

        error = UploadError.OK
        if max_size is not None and size > max_size:
            error = UploadError.INI_SIZE
        elif form_max_size is not None and size > form_max_size:
            error = UploadError.FORM_SIZE

        return cls(
            filename=filename,
            content_type=content_type,
            size=size,
            file=upload.file,
            error=error,
        )


def sniff_content_type(data: bytes) -> str | None:
    """Detect a content type from magic bytes.

    Returns ``None`` if the data does not match a known signature.
    """
    for offset, signature, content_type in _SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return content_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def identify_image(upload: UploadedFile) -> Image.Image | None:
    """Open the upload with Pillow, or return None if it is not an image."""
    if upload.file is None:
        return None
    position = upload.file.tell()
    try:
        upload.file.seek(0)
        image = Image.open(upload.file)
        image.load()
        return image
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError):
        return None
    finally:
        upload.file.seek(position)


def detect_mime_type(upload: UploadedFile, sniff_bytes: int = 2048) -> str:
    """Best guess at the real content type of an upload.

    Content wins over the file name, which wins over what the client said.
    """
    guessed = mimetypes.guess_type(upload.filename)[0]

    content_type = sniff_content_type(upload.head(sniff_bytes))
    if content_type == "application/zip" and guessed:
        # docx, xlsx, odt, epub... are zip containers
        return guessed
    if content_type:
        return content_type

    image = identify_image(upload)
    if image is not None and image.format:
        mime = Image.MIME.get(image.format)
        if mime:
            return mime

    if guessed:
        return guessed

    return upload.content_type or DEFAULT_CONTENT_TYPE
