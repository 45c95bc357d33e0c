"""
Centralized API response builder for AWS Lambda / API Gateway.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.models.errors import PhotoServiceError, RateLimitedError
from core.utils.constants import (
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_INTERNAL_ERROR,
)

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    @staticmethod
    def _build_headers(
        cors_origin: str | None = CORS_ORIGIN,
        headers: dict[str, str] | None = None,
    ) -> dict[str, str]:
        response_headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)

        if cors_origin:
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        if headers:
            response_headers.update(headers)

        return response_headers

    @staticmethod
    def json(
        body: JsonDict,
        *,
        status: HTTPStatus = HTTPStatus.OK,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        return {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin, headers),
            "body": json.dumps(body),
        }

    @staticmethod
    def ok(
        body: JsonDict,
        *,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        return ResponseBuilder.json(
            body, status=HTTPStatus.OK, headers=headers, cors_origin=cors_origin
        )

    @staticmethod
    def created(
        body: JsonDict,
        *,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        return ResponseBuilder.json(
            body, status=HTTPStatus.CREATED, headers=headers, cors_origin=cors_origin
        )

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        code: str,
        details: JsonDict | None = None,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        """Render the standard error envelope.

        Body shape: ``{"error": {"message", "code", "status", "details"?}}``.
        Error responses are never cached.
        """
        error: JsonDict = {
            "message": message,
            "code": code,
            "status": status.value,
        }

        if details:
            error["details"] = details

        response_headers = {"Cache-Control": "no-store"}
        if headers:
            response_headers.update(headers)

        return ResponseBuilder.json(
            {"error": error},
            status=status,
            headers=response_headers,
            cors_origin=cors_origin,
        )

    @staticmethod
    def from_error(
        exc: PhotoServiceError,
        *,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        response_headers = dict(headers or {})

        if isinstance(exc, RateLimitedError) and exc.retry_after:
            response_headers["Retry-After"] = str(exc.retry_after)

        return ResponseBuilder.error(
            status=exc.status,
            message=exc.message,
            code=exc.error_code,
            details=exc.details,
            headers=response_headers,
            cors_origin=cors_origin,
        )

    @staticmethod
    def internal_error(
        message: str = "An unexpected error occurred",
        *,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            code=ERROR_CODE_INTERNAL_ERROR,
            cors_origin=cors_origin,
        )

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
        }

        if cors_origin:
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        if headers:
            response_headers.update(headers)

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }

    @staticmethod
    def head_response(
        headers: dict[str, str],
        *,
        cors_origin: str | None = CORS_ORIGIN,
    ) -> JsonDict:
        """Headers-only response for HEAD requests."""
        response_headers = dict(headers)

        if cors_origin:
            response_headers["Access-Control-Allow-Origin"] = cors_origin

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": "",
        }
