"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from http import HTTPStatus
from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UPLOAD_FAILED = "UPLOAD_FAILED"
ERROR_CODE_FILE_NOT_FOUND = "FILE_NOT_FOUND"
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"
ERROR_CODE_RATE_LIMITED = "RATE_LIMITED"
ERROR_CODE_STORAGE_ERROR = "STORAGE_ERROR"
ERROR_CODE_PROCESSING_ERROR = "PROCESSING_ERROR"
ERROR_CODE_METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"

ERROR_STATUS: Final[dict[str, HTTPStatus]] = {
    ERROR_CODE_VALIDATION_FAILED: HTTPStatus.BAD_REQUEST,
    ERROR_CODE_UPLOAD_FAILED: HTTPStatus.BAD_REQUEST,
    ERROR_CODE_FILE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ERROR_CODE_UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ERROR_CODE_RATE_LIMITED: HTTPStatus.TOO_MANY_REQUESTS,
    ERROR_CODE_STORAGE_ERROR: HTTPStatus.SERVICE_UNAVAILABLE,
    ERROR_CODE_PROCESSING_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ERROR_CODE_METHOD_NOT_ALLOWED: HTTPStatus.METHOD_NOT_ALLOWED,
    ERROR_CODE_INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}

# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
MAX_FILES_PER_UPLOAD = 10

ALLOWED_MIME_TYPES: Final[tuple[str, ...]] = ("image/jpeg", "image/png", "image/webp")

UPLOAD_FORM_FIELD = "photos"
DIMENSIONS_FORM_FIELD = "dimensions"

# S3 user metadata written on upload and read back by the listing
META_ORIGINAL_NAME = "original-name"
META_UPLOADED_AT = "uploaded-at"
META_SIZE = "size"
META_DIMENSIONS = "dimensions"

EVENT_PREFIX_PATTERN = r"^[a-zA-Z0-9_-]+$"
EVENT_PREFIX_MAX_LENGTH = 50

# ============================================================================
# Listing Constraints
# ============================================================================

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_NAME = "name"
SORT_SIZE = "size"
ALLOWED_SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST, SORT_NAME, SORT_SIZE)

# ============================================================================
# Image Processing
# ============================================================================

MIN_DIMENSION = 1
MAX_DIMENSION = 4000
MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 90
ALLOWED_OUTPUT_FORMATS = ("jpeg", "png", "webp")

TRANSFORM_URL_PREFIX = "/cdn-cgi/image"
IMAGES_API_PATH = "/api/images"

OPTIMIZE_START_QUALITY = 95
OPTIMIZE_MIN_QUALITY = 20
OPTIMIZE_QUALITY_STEP = 10
OPTIMIZE_DEFAULT_TARGET_KB = 500

BBFF_LOGO_ASSET = "bbff-logo.png"
HMB_LOGO_ASSET = "hmb-logo.png"
WATERMARK_INSET = 20
WATERMARK_SIZE = 100
WATERMARK_OPACITY = 0.8

# ============================================================================
# Caching
# ============================================================================

DEFAULT_CACHE_TTL = 604800  # 7 days
LIST_CACHE_CONTROL = "public, max-age=30"
HEAD_CACHE_CONTROL = "public, max-age=3600"
STORED_OBJECT_CACHE_CONTROL = "public, max-age=31536000"
RESPONSE_CACHE_PREFIX = "_cache"

# ============================================================================
# Rate Limiting / Authentication
# ============================================================================

DEFAULT_UPLOAD_RATE_LIMIT = 100
RATE_LIMIT_WINDOW_SECONDS = 60 * 60
DEFAULT_UPLOAD_TOKEN = "dev-upload-token"
PRODUCTION_ENVIRONMENT = "production"

HEADER_UPLOAD_TOKEN = "X-Upload-Token"
HEADER_ACCESS_ASSERTION = "Cf-Access-Jwt-Assertion"
HEADER_CLIENT_IP = "CF-Connecting-IP"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_HEADERS = "Content-Type, Authorization, X-Upload-Token"
CORS_MAX_AGE = "86400"
DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_ENVIRONMENT = "ENVIRONMENT"
ENV_EVENT_PREFIX = "EVENT_PREFIX"
ENV_PHOTOS_BUCKET_NAME = "PHOTOS_BUCKET_NAME"
ENV_BRANDING_ASSETS_TABLE_NAME = "BRANDING_ASSETS_TABLE_NAME"
ENV_IMAGE_TRANSFORM_BACKEND = "IMAGE_TRANSFORM_BACKEND"
ENV_MAX_UPLOAD_SIZE = "MAX_UPLOAD_SIZE"
ENV_UPLOAD_RATE_LIMIT = "UPLOAD_RATE_LIMIT"
ENV_UPLOAD_RATE_LIMIT_TABLE_NAME = "UPLOAD_RATE_LIMIT_TABLE_NAME"
ENV_UPLOAD_TOKEN = "UPLOAD_TOKEN"
ENV_CACHE_TTL = "CACHE_TTL"
ENV_ALLOWED_ORIGINS = "ALLOWED_ORIGINS"
ENV_ANALYTICS_NAMESPACE = "ANALYTICS_NAMESPACE"

DEFAULT_EVENT_PREFIX = "25thAnniversary"
DEFAULT_TRANSFORM_BACKEND = "pillow"
