"""Validators for uploaded files."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from formhandler.config import get_settings
from formhandler.exceptions import InvalidValidatorError
from formhandler.fields.upload import UploadField
from formhandler.uploads import UploadedFile, UploadError, detect_mime_type, identify_image
from formhandler.validators.base import AbstractValidator

logger = logging.getLogger(__name__)

# Upload errors and the message key reported for them
UPLOAD_ERROR_MESSAGES = {
    UploadError.INI_SIZE: "file_too_big",
    UploadError.FORM_SIZE: "file_too_big",
    UploadError.PARTIAL: "incomplete",
    UploadError.NO_TMP_DIR: "no_tmp_dir",
    UploadError.CANT_WRITE: "cannot_write",
    UploadError.EXTENSION: "error",
}


def _normalize_extensions(extensions: Iterable[str] | None) -> list[str]:
    return [ext.lower().lstrip(".") for ext in extensions or []]


def _normalize_mime_types(mime_types: Iterable[str] | None) -> list[str]:
    return [mime.lower().strip() for mime in mime_types or []]


class UploadValidator(AbstractValidator):
    """Checks an :class:`UploadField`: presence, upload status, extension,
    detected mime type and size, reporting only the first problem found.
    """

    default_messages = {
        "required": "Please choose a file to upload.",
        "file_too_big": "The uploaded file exceeds the maximum upload size.",
        "incomplete": "The file was only partially uploaded.",
        "no_tmp_dir": "The server has no temporary folder to store the upload.",
        "cannot_write": "The uploaded file could not be stored.",
        "error": "An error occurred while uploading the file.",
        "wrong_extension": "Files with this extension are not allowed.",
        "wrong_type": "Files of this type are not allowed.",
        "file_larger_than": "The file may not be larger than {max_filesize} bytes.",
        "file_smaller_than": "The file must be at least {min_filesize} bytes.",
    }
    message_aliases = {
        "file_larger_then": "file_larger_than",
        "file_smaller_then": "file_smaller_than",
    }

    def __init__(
        self,
        required: bool = True,
        messages: dict[str, str] | None = None,
        *,
        max_filesize: int | None = None,
        min_filesize: int | None = None,
        allowed_extensions: Iterable[str] | None = None,
        denied_extensions: Iterable[str] | None = None,
        allowed_mime_types: Iterable[str] | None = None,
        denied_mime_types: Iterable[str] | None = None,
    ):
        super().__init__(required, messages)
        self.max_filesize = max_filesize
        self.min_filesize = min_filesize
        self.allowed_extensions = allowed_extensions
        self.denied_extensions = denied_extensions
        self.allowed_mime_types = allowed_mime_types
        self.denied_mime_types = denied_mime_types

    # -- Rules --

    @property
    def allowed_extensions(self) -> list[str]:
        return self._allowed_extensions

    @allowed_extensions.setter
    def allowed_extensions(self, extensions: Iterable[str] | None) -> None:
        self._allowed_extensions = _normalize_extensions(extensions)

    @property
    def denied_extensions(self) -> list[str]:
        return self._denied_extensions

    @denied_extensions.setter
    def denied_extensions(self, extensions: Iterable[str] | None) -> None:
        self._denied_extensions = _normalize_extensions(extensions)

    @property
    def allowed_mime_types(self) -> list[str]:
        return self._allowed_mime_types

    @allowed_mime_types.setter
    def allowed_mime_types(self, mime_types: Iterable[str] | None) -> None:
        self._allowed_mime_types = _normalize_mime_types(mime_types)

    @property
    def denied_mime_types(self) -> list[str]:
        return self._denied_mime_types

    @denied_mime_types.setter
    def denied_mime_types(self, mime_types: Iterable[str] | None) -> None:
        self._denied_mime_types = _normalize_mime_types(mime_types)

    # -- Validation --

    def bind(self, field) -> None:
        if not isinstance(field, UploadField):
            raise InvalidValidatorError(
                f"{type(self).__name__} only works on upload fields, "
                f"{field.name!r} is a {type(field).__name__}"
            )
        super().bind(field)

    def validate(self, field) -> None:
        upload: UploadedFile | None = field.value
        if upload is None or upload.is_empty:
            if self.required:
                self.fail("required")
            return

        if upload.error != UploadError.OK:
            logger.info("Upload %r for field %r failed: %s", upload.filename, field.name, upload.error.name)
            self.fail(UPLOAD_ERROR_MESSAGES.get(upload.error, "error"))

        self.check_extension(upload)
        self.check_mime_type(upload)
        self.check_size(upload)

    def check_extension(self, upload: UploadedFile) -> None:
        extension = upload.extension
        if self.allowed_extensions and extension not in self.allowed_extensions:
            self.fail("wrong_extension", extensions=", ".join(self.allowed_extensions))
        if extension and extension in self.denied_extensions:
            self.fail("wrong_extension", extensions=", ".join(self.denied_extensions))

    def check_mime_type(self, upload: UploadedFile) -> None:
        if not self.allowed_mime_types and not self.denied_mime_types:
            return

        mime_type = detect_mime_type(upload, get_settings().uploads.sniff_bytes)
        if self.allowed_mime_types and mime_type not in self.allowed_mime_types:
            self.fail("wrong_type", mime_type=mime_type)
        if mime_type in self.denied_mime_types:
            self.fail("wrong_type", mime_type=mime_type)

    def check_size(self, upload: UploadedFile) -> None:
        if self.max_filesize is not None and upload.size > self.max_filesize:
            self.fail("file_larger_than", max_filesize=self.max_filesize, min_filesize=self.min_filesize)
        if self.min_filesize is not None and upload.size < self.min_filesize:
            self.fail("file_smaller_than", max_filesize=self.max_filesize, min_filesize=self.min_filesize)


class ImageUploadValidator(UploadValidator):
    """Upload validator that also requires a readable image of bounded size."""

    IMAGE_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp"]

    default_messages = {
        **UploadValidator.default_messages,
        "not_an_image": "The uploaded file is not a valid image.",
        "width_too_small": "The image must be at least {min_width} pixels wide.",
        "width_too_large": "The image may be at most {max_width} pixels wide.",
        "height_too_small": "The image must be at least {min_height} pixels high.",
        "height_too_large": "The image may be at most {max_height} pixels high.",
    }

    def __init__(
        self,
        required: bool = True,
        messages: dict[str, str] | None = None,
        *,
        min_width: int | None = None,
        max_width: int | None = None,
        min_height: int | None = None,
        max_height: int | None = None,
        **kwargs,
    ):
        kwargs.setdefault("allowed_mime_types", self.IMAGE_MIME_TYPES)
        super().__init__(required, messages, **kwargs)
        self.min_width = min_width
        self.max_width = max_width
        self.min_height = min_height
        self.max_height = max_height

    def validate(self, field) -> None:
        super().validate(field)

        upload: UploadedFile | None = field.value
        if upload is None or upload.is_empty:
            return

        image = identify_image(upload)
        if image is None:
            self.fail("not_an_image")

        width, height = image.size
        bounds = {
            "min_width": self.min_width,
            "max_width": self.max_width,
            "min_height": self.min_height,
            "max_height": self.max_height,
        }
        if self.min_width is not None and width < self.min_width:
            self.fail("width_too_small", **bounds)
        if self.max_width is not None and width > self.max_width:
            self.fail("width_too_large", **bounds)
        if self.min_height is not None and height < self.min_height:
            self.fail("height_too_small", **bounds)
        if self.max_height is not None and height > self.max_height:
            self.fail("height_too_large", **bounds)
