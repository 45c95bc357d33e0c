"""
Lambda handler responsible for listing the event's photos.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.metrics_analytics import MetricsAnalyticsSink
from core.utils.analytics import record_event
from core.utils.background import background_tasks
from core.utils.config import Settings
from core.utils.constants import LIST_CACHE_CONTROL
from core.utils.cors import resolve_allowed_origin
from core.utils.decorators import api_gateway_handler
from core.utils.request import get_header, get_query_params
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListPhotosRequest
from .service import ListService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(
    methods=("GET",),
    endpoint="list",
    failure_message="Failed to list photos",
)
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle gallery listing requests.

    Query parameters:
        limit: Page size (default 50, capped at 100)
        cursor: Opaque token from a previous page
        sort: newest (default), oldest, name or size

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response with ``{photos, hasMore, cursor?, total}``.
    """
    logger.info(
        "Received photo listing request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    settings = Settings.from_env()
    cors_origin = resolve_allowed_origin(get_header(event, "Origin"), settings.allowed_origins)

    service = ListService(settings)
    service.ensure_storage()

    query_params = get_query_params(event)
    request = validate_request(
        ListPhotosRequest,
        {
            "limit": query_params.get("limit"),
            "cursor": query_params.get("cursor"),
            "sort": query_params.get("sort"),
        },
    )

    result = service.list_photos(
        limit=request.limit,
        cursor=request.cursor,
        sort=request.sort,
    )

    background_tasks.submit(
        record_event,
        MetricsAnalyticsSink.from_settings(settings),
        "gallery_view",
        photoCount=result.total,
        event=settings.event_prefix,
    )

    return ResponseBuilder.ok(
        result.to_api(),
        headers={"Cache-Control": LIST_CACHE_CONTROL},
        cors_origin=cors_origin,
    )
