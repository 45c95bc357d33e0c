"""Custom exception classes for the photo service.

Each error kind carries a stable error code and the HTTP status it maps to,
so handlers can render any of them through a single response path.
"""

from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    ERROR_CODE_FILE_NOT_FOUND,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_METHOD_NOT_ALLOWED,
    ERROR_CODE_PROCESSING_ERROR,
    ERROR_CODE_RATE_LIMITED,
    ERROR_CODE_STORAGE_ERROR,
    ERROR_CODE_UNAUTHORIZED,
    ERROR_CODE_UPLOAD_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
    ERROR_STATUS,
)


class PhotoServiceError(Exception):
    """
    Base exception for all photo service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)

    @property
    def status(self) -> HTTPStatus:
        """HTTP status for this error's code."""
        return ERROR_STATUS.get(self.error_code, HTTPStatus.INTERNAL_SERVER_ERROR)


class ValidationFailedError(PhotoServiceError):
    """Raised when request or file validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class UploadFailedError(PhotoServiceError):
    """Raised when a single file cannot be written to storage."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class PhotoNotFoundError(PhotoServiceError):
    """Raised when a requested photo does not exist."""

    def __init__(
        self,
        *,
        message: str = "Requested resource not found",
        error_code: str = ERROR_CODE_FILE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)

    @classmethod
    def for_filename(cls, filename: str | None) -> "PhotoNotFoundError":
        if not filename:
            return cls()
        return cls(message=f"File '{filename}' not found", details={"filename": filename})


class UnauthorizedError(PhotoServiceError):
    """Raised when an upload request is not authenticated."""

    def __init__(
        self,
        *,
        message: str = "Unauthorized access",
        error_code: str = ERROR_CODE_UNAUTHORIZED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RateLimitedError(PhotoServiceError):
    """Raised when a client exceeds its upload window."""

    retry_after: int | None

    def __init__(
        self,
        *,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        error_code: str = ERROR_CODE_RATE_LIMITED,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.retry_after = retry_after
        if retry_after:
            details = {**(details or {}), "retryAfter": retry_after}
        super().__init__(message=message, error_code=error_code, details=details)


class StorageError(PhotoServiceError):
    """Raised when the object store is unavailable or misconfigured."""

    def __init__(
        self,
        *,
        message: str = "Storage not configured",
        error_code: str = ERROR_CODE_STORAGE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ProcessingError(PhotoServiceError):
    """Raised when the image transform service fails."""

    def __init__(
        self,
        *,
        message: str = "Image processing failed",
        error_code: str = ERROR_CODE_PROCESSING_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class CapabilityUnavailableError(ProcessingError):
    """Raised when no image transform capability is configured."""

    def __init__(
        self,
        *,
        message: str = "Image transform capability not available",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)


class MethodNotAllowedError(PhotoServiceError):
    """Raised when an endpoint receives an unsupported HTTP method."""

    def __init__(
        self,
        *,
        message: str = "Method not allowed",
        error_code: str = ERROR_CODE_METHOD_NOT_ALLOWED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ConfigurationError(PhotoServiceError):
    """Raised when required configuration is missing or malformed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class InternalError(PhotoServiceError):
    """Raised for failures the caller cannot correct."""

    def __init__(
        self,
        *,
        message: str = "An unexpected error occurred",
        error_code: str = ERROR_CODE_INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageOperationError(InternalError):
    """Raised when an object store call fails after storage is configured."""

    def __init__(
        self,
        *,
        message: str = "Storage operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)
