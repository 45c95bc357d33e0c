"""Upload file validation and naming helpers."""

import random
import re
import string

from aws_lambda_powertools import Logger

from core.models.photo import DEFAULT_CONSTRAINTS, FileValidationResult, UploadConstraints, UploadedFile
from core.utils.constants import EVENT_PREFIX_MAX_LENGTH, EVENT_PREFIX_PATTERN
from core.utils.mime import SIGNATURE_LENGTH, has_image_signature
from core.utils.time import epoch_millis

logger = Logger(utc=True)

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


def format_bytes(size: int) -> str:
    """Format a byte count for humans, e.g. ``1.5 MB``."""
    if size <= 0:
        return "0 Bytes"

    exponent = 0
    while exponent < len(_BYTE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1

    formatted = f"{size / 1024**exponent:.2f}".rstrip("0").rstrip(".")
    return f"{formatted} {_BYTE_UNITS[exponent]}"


def _has_valid_signature(file: UploadedFile) -> bool:
    # Anything short of a known signature fails closed
    if not has_image_signature(file.data[:SIGNATURE_LENGTH]):
        logger.debug("Magic byte check failed", extra={"upload_filename": file.filename})
        return False
    return True


def validate_file(
    file: UploadedFile,
    constraints: UploadConstraints = DEFAULT_CONSTRAINTS,
) -> FileValidationResult:
    """Validate one file against size, declared type and magic bytes."""
    if file.size > constraints.max_file_size:
        return FileValidationResult(
            file=file,
            valid=False,
            error=(
                f"File size {format_bytes(file.size)} exceeds maximum allowed size "
                f"of {format_bytes(constraints.max_file_size)}"
            ),
        )

    if file.content_type not in constraints.allowed_types:
        return FileValidationResult(
            file=file,
            valid=False,
            error=(
                f"File type {file.content_type} is not allowed. "
                f"Allowed types: {', '.join(constraints.allowed_types)}"
            ),
        )

    if not _has_valid_signature(file):
        return FileValidationResult(
            file=file,
            valid=False,
            error="File does not appear to be a valid image",
        )

    return FileValidationResult(file=file, valid=True)


def validate_files(
    files: list[UploadedFile],
    constraints: UploadConstraints = DEFAULT_CONSTRAINTS,
) -> list[FileValidationResult]:
    """Validate a batch; an oversized batch marks every file invalid."""
    if len(files) > constraints.max_files:
        message = f"Too many files selected. Maximum allowed: {constraints.max_files}"
        return [FileValidationResult(file=f, valid=False, error=message) for f in files]

    return [validate_file(f, constraints) for f in files]


def generate_unique_filename(original_name: str) -> str:
    """Return ``<epoch-millis>-<6 random chars>.<original extension>``."""
    extension = original_name.rsplit(".", 1)[-1]
    timestamp = epoch_millis()
    suffix = "".join(random.choices(_RANDOM_ALPHABET, k=6))
    return f"{timestamp}-{suffix}.{extension}"


def sanitize_filename(filename: str) -> str:
    """Make a file name safe for storage keys and display."""
    replaced = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    return _REPEATED_UNDERSCORES.sub("_", replaced).lower()


def validate_event_prefix(prefix: str) -> bool:
    return (
        bool(re.fullmatch(EVENT_PREFIX_PATTERN, prefix))
        and 0 < len(prefix) <= EVENT_PREFIX_MAX_LENGTH
    )
