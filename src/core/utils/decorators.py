"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.aws.metrics_analytics import MetricsAnalyticsSink
from core.models.errors import ConfigurationError, MethodNotAllowedError, PhotoServiceError
from core.utils.analytics import log_error
from core.utils.config import Settings
from core.utils.constants import CORS_ORIGIN
from core.utils.cors import handle_cors, resolve_allowed_origin
from core.utils.request import get_header, get_method
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

JsonDict = dict[str, Any]


def _log_handled_error(
    exc: PhotoServiceError,
    *,
    endpoint: str,
    handler_name: str,
    request_id: str | None,
    settings: Settings | None,
) -> None:
    """
    Log a domain error with consistent structure.

    Client errors (4xx) are warnings; server-side failures go through
    ``log_error`` so they also reach analytics.
    """
    log_extra = {
        "endpoint": endpoint,
        "handler": handler_name,
        "request_id": request_id,
        "error_code": exc.error_code,
        "error": exc.message,
    }

    if exc.status < HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.warning("Request rejected", extra=log_extra)
        return

    analytics = MetricsAnalyticsSink.from_settings(settings) if settings else None
    log_error(exc, log_extra, analytics)


def api_gateway_handler(
    *,
    methods: Iterable[str],
    endpoint: str,
    failure_message: str = "An unexpected error occurred",
) -> Callable[[Callable[..., JsonDict]], Callable[..., JsonDict]]:
    """
    Decorator factory for API Gateway Lambda handlers.

    Provides:
    - CORS preflight (OPTIONS) handling
    - 405 METHOD_NOT_ALLOWED for methods the endpoint does not serve
    - Domain errors rendered as the standard error envelope
    - Unexpected errors logged with context and reported as INTERNAL_ERROR

    Example:
        @api_gateway_handler(methods=("GET",), endpoint="list",
                             failure_message="Failed to list photos")
        def handler(event, context):
            ...
    """
    allowed_methods = tuple(m.upper() for m in methods)

    def decorator(func: Callable[..., JsonDict]) -> Callable[..., JsonDict]:
        @wraps(func)
        def wrapper(event: JsonDict, context: Any) -> JsonDict:
            request_id = getattr(context, "aws_request_id", None)
            settings: Settings | None = None
            cors_origin: str | None = CORS_ORIGIN

            try:
                settings = Settings.from_env()

                preflight = handle_cors(event, settings.allowed_origins)
                if preflight:
                    return preflight

                cors_origin = resolve_allowed_origin(
                    get_header(event, "Origin"), settings.allowed_origins
                )

                method = get_method(event)
                if method not in allowed_methods:
                    raise MethodNotAllowedError(details={"method": method})

                return func(event, context)

            except MethodNotAllowedError as exc:
                return ResponseBuilder.from_error(
                    exc,
                    headers={"Allow": ", ".join((*allowed_methods, "OPTIONS"))},
                    cors_origin=cors_origin,
                )

            except ConfigurationError as exc:
                _log_handled_error(
                    exc,
                    endpoint=endpoint,
                    handler_name=func.__name__,
                    request_id=request_id,
                    settings=settings,
                )
                return ResponseBuilder.internal_error(failure_message)

            except PhotoServiceError as exc:
                _log_handled_error(
                    exc,
                    endpoint=endpoint,
                    handler_name=func.__name__,
                    request_id=request_id,
                    settings=settings,
                )
                return ResponseBuilder.from_error(exc, cors_origin=cors_origin)

            # Catch-all for unexpected errors
            except Exception as exc:
                analytics = MetricsAnalyticsSink.from_settings(settings) if settings else None
                log_error(
                    exc,
                    {
                        "endpoint": endpoint,
                        "handler": func.__name__,
                        "request_id": request_id,
                    },
                    analytics,
                )
                return ResponseBuilder.internal_error(failure_message)

        return wrapper

    return decorator
