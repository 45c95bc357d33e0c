"""
Operational error logging and best-effort analytics forwarding.

Nothing in this module raises: analytics is observability, not part of the
request contract.
"""

import traceback
from typing import Any

from aws_lambda_powertools import Logger

from core.repositories.analytics_sink import AnalyticsSink
from core.utils.time import utc_now_iso

logger = Logger(utc=True)


def record_event(
    analytics: AnalyticsSink | None,
    event_type: str,
    **fields: Any,
) -> None:
    """Write an analytics blob, logging and swallowing any sink failure."""
    if analytics is None:
        return

    blob: dict[str, Any] = {"type": event_type, "timestamp": utc_now_iso(), **fields}

    try:
        analytics.write(blob)
    except Exception as exc:
        logger.warning(
            "Failed to write analytics event",
            extra={"analytics_type": event_type, "error": str(exc)},
        )


def log_error(
    error: BaseException | str,
    context: dict[str, Any] | None = None,
    analytics: AnalyticsSink | None = None,
) -> None:
    """Log an error locally and forward it to analytics."""
    context = context or {}

    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
        stack = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        logger.error(
            message,
            extra={"context": context, "error_type": type(error).__name__},
            exc_info=error,
        )
    else:
        message = error
        stack = None
        logger.error(message, extra={"context": context})

    record_event(analytics, "error", message=message, stack=stack, context=context)
