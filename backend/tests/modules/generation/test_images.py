"""Tests for image payload helpers."""

import base64

import pytest

from modules.generation import (
    ImageData,
    InvalidImageDataError,
    parse_data_url,
    parse_image_input,
    to_data_url,
)
from modules.generation.images import detect_mime_type


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16
WEBP_BYTES = b"RIFF\x00\x00\x00\x00WEBPVP8 "


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestDetectMimeType:
    @pytest.mark.parametrize(
        "data,expected",
        [
            (PNG_BYTES, "image/png"),
            (JPEG_BYTES, "image/jpeg"),
            (b"GIF89a" + b"\x00" * 8, "image/gif"),
            (WEBP_BYTES, "image/webp"),
            (b"plain text", "application/octet-stream"),
        ],
    )
    def test_magic_bytes(self, data, expected):
        assert detect_mime_type(data) == expected


class TestParseDataUrl:
    def test_valid(self):
        image = parse_data_url(f"data:image/png;base64,{b64(PNG_BYTES)}")
        assert image == ImageData(mime_type="image/png", data=PNG_BYTES)

    def test_mime_sniffed_when_absent(self):
        image = parse_data_url(f"data:;base64,{b64(JPEG_BYTES)}")
        assert image.mime_type == "image/jpeg"

    @pytest.mark.parametrize(
        "value",
        ["", "not a data url", "data:image/png,rawbytes", "https://img.example/x.png"],
    )
    def test_invalid_format(self, value):
        with pytest.raises(InvalidImageDataError) as exc_info:
            parse_data_url(value)
        assert exc_info.value.message == "Invalid image data URL format"

    def test_invalid_base64(self):
        with pytest.raises(InvalidImageDataError):
            parse_data_url("data:image/png;base64,!!!not-base64!!!")


class TestParseImageInput:
    def test_accepts_data_url(self):
        assert parse_image_input(to_data_url(PNG_BYTES, "image/png")).data == PNG_BYTES

    def test_accepts_raw_base64(self):
        image = parse_image_input(b64(PNG_BYTES))
        assert image.mime_type == "image/png"

    def test_blank(self):
        with pytest.raises(InvalidImageDataError):
            parse_image_input("   ")


class TestImageData:
    @pytest.mark.parametrize(
        "mime_type,extension",
        [("image/png", "png"), ("image/jpeg", "jpg"), ("application/octet-stream", "bin"), ("junk", "bin")],
    )
    def test_extension(self, mime_type, extension):
        assert ImageData(mime_type=mime_type, data=b"x").extension == extension

    def test_to_data_url(self):
        assert ImageData(mime_type="image/png", data=b"img").to_data_url() == "data:image/png;base64,aW1n"
