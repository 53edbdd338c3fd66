"""First-byte MIME sniffing for multipart data fields."""

DEFAULT_MIME_TYPE = "application/octet-stream"

# Coarse single-byte signatures; several formats share a leading byte.
MIME_TYPE_SIGNATURES = {
    0xFF: "image/jpeg",
    0x89: "image/png",
    0x47: "image/gif",
    0x49: "image/tiff",
    0x4D: "image/tiff",
    0x25: "application/pdf",
    0xD0: "application/vnd",
    0x46: "text/plain",
}


def sniff_mime_type(data: bytes) -> str:
    """Return the MIME type implied by the first byte of ``data``."""
    if not data:
        return DEFAULT_MIME_TYPE
    return MIME_TYPE_SIGNATURES.get(data[0], DEFAULT_MIME_TYPE)
