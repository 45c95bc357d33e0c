"""Helpers for reading API Gateway proxy events."""

import base64
from typing import Any

JsonDict = dict[str, Any]


def get_header(event: JsonDict, name: str, default: str | None = None) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return default


def get_method(event: JsonDict) -> str:
    return (event.get("httpMethod") or "GET").upper()


def get_query_params(event: JsonDict) -> dict[str, str]:
    return dict(event.get("queryStringParameters") or {})


def get_path_params(event: JsonDict) -> dict[str, str]:
    return dict(event.get("pathParameters") or {})


def get_raw_body(event: JsonDict) -> bytes:
    """Return the request body as bytes, decoding base64 payloads."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body)

    if isinstance(body, bytes):
        return body

    return body.encode("utf-8")
