"""
Lambda handler responsible for serving processed, watermarked photos.
"""

from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.imaging.options import create_cache_key, get_optimal_format
from core.infrastructure.aws.metrics_analytics import MetricsAnalyticsSink
from core.models.image import CachedImage
from core.utils.analytics import record_event
from core.utils.background import background_tasks
from core.utils.config import Settings
from core.utils.constants import DEFAULT_IMAGE_CONTENT_TYPE, HEAD_CACHE_CONTROL
from core.utils.cors import resolve_allowed_origin
from core.utils.decorators import api_gateway_handler
from core.utils.request import get_header, get_method, get_path_params, get_query_params
from core.utils.response import ResponseBuilder
from core.utils.time import http_date
from core.utils.validators import validate_request

from .models import ServeImageRequest
from .service import ServeService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()

CACHE_HIT = "HIT"
CACHE_MISS = "MISS"


def _requested_key(event: dict[str, Any]) -> str | None:
    path_params = get_path_params(event)
    raw = path_params.get("key") or path_params.get("proxy")
    return unquote(raw) if raw else None


def _head(
    service: ServeService,
    requested_key: str | None,
    cors_origin: str | None,
) -> dict[str, Any]:
    service.ensure_storage()
    resolved_key = service.resolve_key(requested_key)
    info = service.describe(resolved_key, requested_key or "")

    return ResponseBuilder.head_response(
        {
            "Content-Type": info.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
            "Content-Length": str(info.size),
            "Last-Modified": http_date(info.last_modified),
            "Cache-Control": HEAD_CACHE_CONTROL,
        },
        cors_origin=cors_origin,
    )


@api_gateway_handler(
    methods=("GET", "HEAD"),
    endpoint="images",
    failure_message="Failed to serve image",
)
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Serve a photo resized, re-encoded and watermarked per query parameters.

    Query parameters:
        w, h: Target dimensions (1-4000); one alone keeps the aspect ratio
        q: Quality (1-100, default 90)
        watermark: "false" disables the logo overlay

    The output format follows the Accept header (webp or jpeg). Processed
    results are cached; the cache write happens after the response is built
    and never delays it. HEAD returns object metadata without processing.
    """
    logger.info(
        "Received image request",
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

    service = ServeService(settings)
    requested_key = _requested_key(event)

    if get_method(event) == "HEAD":
        return _head(service, requested_key, cors_origin)

    service.ensure_storage()
    resolved_key = service.resolve_key(requested_key)

    query_params = get_query_params(event)
    request = validate_request(
        ServeImageRequest,
        {
            "w": query_params.get("w"),
            "h": query_params.get("h"),
            "q": query_params.get("q"),
            "watermark": query_params.get("watermark"),
        },
    )
    options = request.to_options(get_optimal_format(get_header(event, "Accept")))
    service.validate_options(options)

    cache_key = create_cache_key(resolved_key, options)
    cached = service.get_cached(cache_key)

    if cached is not None:
        logger.debug("Serving cached image", extra={"cache_key": cache_key})
        return ResponseBuilder.binary_response(
            cached.body,
            content_type=cached.content_type,
            headers={**cached.headers, "X-Cache": CACHE_HIT},
            cors_origin=cors_origin,
        )

    result = service.render(resolved_key, requested_key or "", options)
    content_type = result.content_type or f"image/{options.format}"

    headers = {
        "Cache-Control": f"public, max-age={settings.cache_ttl}",
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Vary": "Accept",
        "X-Original-Key": resolved_key,
        "X-Processing-Options": options.to_header(),
    }

    background_tasks.submit(
        service.store_cached,
        cache_key,
        CachedImage(body=result.body, content_type=content_type, headers=headers),
    )
    background_tasks.submit(
        record_event,
        MetricsAnalyticsSink.from_settings(settings),
        "image_served",
        imageKey=resolved_key,
        processingOptions=options.model_dump(exclude_none=True),
        event=settings.event_prefix,
    )

    return ResponseBuilder.binary_response(
        result.body,
        content_type=content_type,
        headers={**headers, "X-Cache": CACHE_MISS},
        cors_origin=cors_origin,
    )
