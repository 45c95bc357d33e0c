from core.utils.mime import detect_mime_type, has_image_signature


def test_detect_jpeg() -> None:
    assert detect_mime_type(b"\xff\xd8\xff\xe0abc") == "image/jpeg"


def test_detect_png() -> None:
    assert detect_mime_type(b"\x89PNG\r\n\x1a\nxxx") == "image/png"


def test_detect_webp() -> None:
    assert detect_mime_type(b"RIFF\x00\x00\x00\x00WEBP") == "image/webp"


def test_riff_without_webp_marker_is_unknown() -> None:
    assert detect_mime_type(b"RIFF\x00\x00\x00\x00AVI ") is None


def test_unsupported_type() -> None:
    assert detect_mime_type(b"random-bytes") is None
    assert has_image_signature(b"random-bytes") is False
