"""
Time-related utilities for the application.

All timestamps are generated in UTC and serialized using
ISO-8601 format with timezone information so that upload
times sort correctly as plain strings.
"""

import time
from datetime import datetime, timezone
from email.utils import format_datetime


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


def to_utc_iso(value: datetime) -> str:
    """Normalize a datetime to an ISO-8601 UTC string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def http_date(value: datetime) -> str:
    """Format a datetime as an RFC 7231 HTTP date (e.g. for Last-Modified)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)
