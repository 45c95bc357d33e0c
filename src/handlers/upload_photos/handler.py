"""
Lambda handler responsible for event photo uploads.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.metrics_analytics import MetricsAnalyticsSink
from core.utils.analytics import record_event
from core.utils.background import background_tasks
from core.utils.config import Settings
from core.utils.cors import resolve_allowed_origin
from core.utils.decorators import api_gateway_handler
from core.utils.request import get_header, get_raw_body
from core.utils.response import ResponseBuilder

from .models import UploadCredentials
from .service import UploadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(
    methods=("POST",),
    endpoint="upload",
    failure_message="Upload processing failed",
)
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle multipart photo uploads.

    Checks run in order: storage configured (503), rate limit (429),
    authentication (401), then all-or-nothing validation (400). Files that
    pass are stored concurrently.

    Returns:
        201 when every file is stored, 206 when some storage writes failed.
    """
    logger.info(
        "Received photo upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "content_length": len(event.get("body") or ""),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    settings = Settings.from_env()
    cors_origin = resolve_allowed_origin(get_header(event, "Origin"), settings.allowed_origins)

    service = UploadService(settings)
    service.ensure_storage()

    credentials = UploadCredentials.from_event(event)
    service.check_rate_limit(credentials.client_key)
    service.authenticate(credentials)

    form = service.parse_form(get_raw_body(event), get_header(event, "Content-Type"))
    service.validate(form.files)

    result = service.upload_photos(form.files)

    if result.photos:
        background_tasks.submit(
            record_event,
            MetricsAnalyticsSink.from_settings(settings),
            "upload",
            count=len(result.photos),
            totalSize=sum(photo.size for photo in result.photos),
            event=settings.event_prefix,
        )

    return ResponseBuilder.json(
        result.to_api(),
        status=HTTPStatus.CREATED if result.success else HTTPStatus.PARTIAL_CONTENT,
        cors_origin=cors_origin,
    )
