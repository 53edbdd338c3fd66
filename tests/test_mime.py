"""Tests for first-byte MIME sniffing."""

import pytest

from courier.mime import DEFAULT_MIME_TYPE, sniff_mime_type


@pytest.mark.parametrize(
    "first_byte, expected",
    [
        (0xFF, "image/jpeg"),
        (0x89, "image/png"),
        (0x47, "image/gif"),
        (0x49, "image/tiff"),
        (0x4D, "image/tiff"),
        (0x25, "application/pdf"),
        (0xD0, "application/vnd"),
        (0x46, "text/plain"),
    ],
)
def test_signature_table(first_byte, expected):
    assert sniff_mime_type(bytes([first_byte, 0x00, 0x13, 0x37])) == expected


def test_png_header():
    assert sniff_mime_type(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16) == "image/png"


def test_empty_data_is_octet_stream():
    assert sniff_mime_type(b"") == DEFAULT_MIME_TYPE == "application/octet-stream"


def test_unknown_leading_byte_is_octet_stream():
    assert sniff_mime_type(b"\x00\x89PNG") == "application/octet-stream"
    assert sniff_mime_type(b"{\"json\": true}") == "application/octet-stream"


def test_only_first_byte_is_considered():
    # "GIF" would be right, but so is anything else starting with "G"
    assert sniff_mime_type(b"GET / HTTP/1.1") == "image/gif"
