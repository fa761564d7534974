"""
Image payload helpers.

Images travel as data URLs (`data:<mime>;base64,<payload>`). Raw base64 is
also accepted on input, with the MIME type sniffed from the magic bytes.
"""

import base64
import binascii
import re
from dataclasses import dataclass

from .exceptions import InvalidImageDataError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*);base64,(?P<data>.+)$", re.IGNORECASE | re.DOTALL)

_MAGIC_BYTES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF8", "image/gif"),
    (b"BM", "image/bmp"),
]


@dataclass(frozen=True)
class ImageData:
    """Decoded image bytes with their MIME type."""

    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)

    @property
    def extension(self) -> str:
        """File extension for the MIME type, "bin" when unknown."""
        if "/" not in self.mime_type:
            return "bin"
        subtype = self.mime_type.split("/", 1)[1].lower()
        return {"jpeg": "jpg", "svg+xml": "svg", "octet-stream": "bin"}.get(subtype, subtype)


def detect_mime_type(data: bytes) -> str:
    for magic, mime_type in _MAGIC_BYTES:
        if data.startswith(magic):
            return mime_type
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"


def parse_data_url(value: str) -> ImageData:
    """
    Decode a base64 data URL.

    Raises:
        InvalidImageDataError: If the value is not a base64 data URL
    """
    match = _DATA_URL_RE.match(value.strip()) if value else None
    if not match:
        raise InvalidImageDataError("Invalid image data URL format")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageDataError("Image data URL does not contain valid base64")
    if not data:
        raise InvalidImageDataError("Image data URL is empty")
    return ImageData(mime_type=match.group("mime") or detect_mime_type(data), data=data)


def parse_image_input(value: str) -> ImageData:
    """Accept a data URL or raw base64 image bytes."""
    if not value or not value.strip():
        raise InvalidImageDataError("Image is required")
    if value.strip().lower().startswith("data:"):
        return parse_data_url(value)
    try:
        data = base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageDataError("Invalid image data URL format")
    if not data:
        raise InvalidImageDataError("Image is required")
    return ImageData(mime_type=detect_mime_type(data), data=data)


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
