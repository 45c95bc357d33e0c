import base64
import json
from http import HTTPStatus
from typing import Any, cast

from core.models.errors import PhotoNotFoundError, RateLimitedError, ValidationFailedError
from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert resp["headers"]["Content-Type"] == "application/json"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_created_response() -> None:
    resp = ResponseBuilder.created({"id": 1})

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert parse_body(resp)["id"] == 1


def test_no_cors_origin_omits_header() -> None:
    resp = ResponseBuilder.ok({}, cors_origin=None)
    assert "Access-Control-Allow-Origin" not in resp["headers"]


def test_error_envelope() -> None:
    resp = ResponseBuilder.error(
        status=HTTPStatus.BAD_REQUEST,
        message="Invalid input",
        code="VALIDATION_FAILED",
        details={"field": "photos"},
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parsed == {
        "error": {
            "message": "Invalid input",
            "code": "VALIDATION_FAILED",
            "status": 400,
            "details": {"field": "photos"},
        }
    }
    assert resp["headers"]["Cache-Control"] == "no-store"


def test_error_envelope_omits_empty_details() -> None:
    resp = ResponseBuilder.from_error(PhotoNotFoundError())
    assert "details" not in parse_body(resp)["error"]


def test_from_error_uses_error_status() -> None:
    resp = ResponseBuilder.from_error(ValidationFailedError(message="nope"))

    assert resp["statusCode"] == 400
    assert parse_body(resp)["error"]["code"] == "VALIDATION_FAILED"


def test_rate_limited_error_sets_retry_after() -> None:
    resp = ResponseBuilder.from_error(RateLimitedError(message="slow", retry_after=90))
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.TOO_MANY_REQUESTS
    assert resp["headers"]["Retry-After"] == "90"
    assert parsed["error"]["details"]["retryAfter"] == 90


def test_internal_error() -> None:
    resp = ResponseBuilder.internal_error("Failed to list photos")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parsed["error"]["message"] == "Failed to list photos"
    assert parsed["error"]["code"] == "INTERNAL_ERROR"


def test_binary_response() -> None:
    content = b"binary-data"

    resp = ResponseBuilder.binary_response(
        content,
        content_type="image/png",
        headers={"X-Cache": "MISS"},
        cors_origin="*",
    )

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["isBase64Encoded"] is True
    assert base64.b64decode(resp["body"]) == content
    assert resp["headers"]["Content-Type"] == "image/png"
    assert resp["headers"]["Content-Length"] == str(len(content))
    assert resp["headers"]["X-Cache"] == "MISS"


def test_head_response_has_empty_body() -> None:
    resp = ResponseBuilder.head_response({"Content-Length": "10"}, cors_origin="*")

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["body"] == ""
    assert resp["headers"]["Content-Length"] == "10"
