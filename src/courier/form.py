"""Multipart form body builder."""

import uuid
from typing import List

from .mime import sniff_mime_type

_CRLF = "\r\n"


class CourierFormData:
    """Accumulates ``multipart/form-data`` fields for a single request.

    The boundary is generated once per instance and is referenced both by the
    body framing and by :attr:`content_type`. Fields are encoded in the order
    they are added.
    """

    def __init__(self):
        self._boundary = str(uuid.uuid4()).upper()
        self._parts: List[bytes] = []

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    def add_text_field(self, name: str, value: str) -> None:
        field = (
            f"--{self._boundary}{_CRLF}"
            f'Content-Disposition: form-data; name="{name}"{_CRLF}'
            f"Content-Type: text/plain; charset=ISO-8859-1{_CRLF}"
            f"Content-Transfer-Encoding: 8bit{_CRLF}"
            f"{_CRLF}"
            f"{value}{_CRLF}"
        )
        self._parts.append(field.encode("utf-8"))

    def add_data_field(self, name: str, data: bytes) -> None:
        """Append a binary field; the filename is always the field name."""
        header = (
            f"--{self._boundary}{_CRLF}"
            f'Content-Disposition: form-data; name="{name}"; filename="{name}"{_CRLF}'
            f"Content-Type: {sniff_mime_type(data)}{_CRLF}"
            f"{_CRLF}"
        )
        self._parts.append(header.encode("utf-8") + bytes(data) + _CRLF.encode("utf-8"))

    def finalize(self) -> bytes:
        """Append the closing boundary and return the complete body.

        Each call appends another closing marker, so call it once per request.
        """
        self._parts.append(f"--{self._boundary}--".encode("utf-8"))
        return b"".join(self._parts)
