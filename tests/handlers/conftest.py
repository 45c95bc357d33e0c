import base64
from collections.abc import Callable
from typing import Any

import pytest
from requests_toolbelt import MultipartEncoder


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """
    Builder for API Gateway proxy events.

    Usage:
        event = api_event("GET", "/api/list", query={"limit": "10"})
    """

    def _build(
        method: str = "GET",
        path: str = "/",
        *,
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        path_params: dict[str, str] | None = None,
        body: bytes | str | None = None,
        source_ip: str = "203.0.113.10",
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "httpMethod": method,
            "path": path,
            "queryStringParameters": query,
            "pathParameters": path_params,
            "headers": headers or {},
            "requestContext": {"identity": {"sourceIp": source_ip}},
            "body": None,
            "isBase64Encoded": False,
        }

        if isinstance(body, bytes):
            event["body"] = base64.b64encode(body).decode("utf-8")
            event["isBase64Encoded"] = True
        elif body is not None:
            event["body"] = body

        return event

    return _build


@pytest.fixture
def upload_event(api_event) -> Callable[..., dict[str, Any]]:
    """
    Builder for multipart upload events.

    Usage:
        event = upload_event([("a.jpg", data, "image/jpeg")])
    """

    def _build(
        files: list[tuple[str, bytes, str]],
        *,
        token: str | None = "dev-upload-token",
        headers: dict[str, str] | None = None,
        dimensions: list[str] | None = None,
        client_ip: str | None = None,
    ) -> dict[str, Any]:
        fields: list[tuple[str, Any]] = [("photos", file) for file in files]
        fields.extend(("dimensions", value) for value in dimensions or [])
        encoder = MultipartEncoder(fields=fields)

        request_headers = {"Content-Type": encoder.content_type}
        if token is not None:
            request_headers["X-Upload-Token"] = token
        if client_ip:
            request_headers["CF-Connecting-IP"] = client_ip
        request_headers.update(headers or {})

        return api_event(
            "POST",
            "/api/upload",
            headers=request_headers,
            body=encoder.to_string(),
        )

    return _build
