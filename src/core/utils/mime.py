from collections.abc import Mapping

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
}

WEBP_RIFF = b"RIFF"
WEBP_MARKER = b"WEBP"
SIGNATURE_LENGTH = 12


def detect_mime_type(header: bytes) -> str | None:
    """Return the image type announced by the leading bytes, if any."""
    for signature, mime in MAGIC_BYTES.items():
        if header.startswith(signature):
            return mime

    # WebP: "RIFF" at offset 0, "WEBP" at offset 8
    if header.startswith(WEBP_RIFF) and header[8:12] == WEBP_MARKER:
        return "image/webp"

    return None


def has_image_signature(header: bytes) -> bool:
    return detect_mime_type(header) is not None
