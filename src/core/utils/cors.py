"""CORS preflight handling shared by all endpoints."""

from collections.abc import Sequence
from http import HTTPStatus
from typing import Any

from core.utils.constants import CORS_HEADERS, CORS_MAX_AGE, CORS_METHODS, CORS_ORIGIN
from core.utils.request import get_header, get_method

JsonDict = dict[str, Any]


def resolve_allowed_origin(
    origin: str | None,
    allowed_origins: Sequence[str] = (CORS_ORIGIN,),
) -> str | None:
    """Return the Access-Control-Allow-Origin value for a request, or None."""
    if CORS_ORIGIN in allowed_origins:
        return origin or CORS_ORIGIN

    if origin and origin in allowed_origins:
        return origin

    return None


def handle_cors(
    event: JsonDict,
    allowed_origins: Sequence[str] = (CORS_ORIGIN,),
) -> JsonDict | None:
    """Answer an OPTIONS preflight request.

    Returns a 204 response for OPTIONS requests and None for every other
    method. Origins that are neither wildcard-permitted nor listed get no
    Access-Control-Allow-Origin header, so the browser rejects them.
    """
    if get_method(event) != "OPTIONS":
        return None

    headers: dict[str, str] = {
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Max-Age": CORS_MAX_AGE,
    }

    origin = get_header(event, "Origin")
    allow_origin = resolve_allowed_origin(origin, allowed_origins)

    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
        if origin:
            headers["Access-Control-Allow-Credentials"] = "true"

    return {
        "statusCode": HTTPStatus.NO_CONTENT.value,
        "headers": headers,
        "body": "",
    }
