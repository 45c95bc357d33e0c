"""DynamoDB fixed-window rate limiter shared across instances.

One item per client and window: ``client_key`` (S), ``window_start`` (N),
``request_count`` (N) and ``expires_at`` (N, TTL attribute). The counter is
bumped with a conditional ``ADD`` so attempts beyond the limit are refused
without being counted.
"""

import time
from collections.abc import Callable

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.repositories.rate_limiter import RateLimitDecision, RateLimiter
from core.utils.constants import RATE_LIMIT_WINDOW_SECONDS

logger = Logger(utc=True)


class DynamoDBRateLimiter(RateLimiter):
    def __init__(
        self,
        adapter: DynamoDBAdapter,
        *,
        limit: int,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db = adapter
        self._limit = limit
        self._window = window_seconds
        self._clock = clock

    def check_and_increment(self, client_key: str) -> RateLimitDecision:
        now = int(self._clock())
        window_start = now - now % self._window
        reset_at = window_start + self._window

        try:
            self._db.update_item(
                key={"client_key": f"{client_key}#{window_start}"},
                update_expression="ADD #count :one SET #expires = :expires",
                expression_attribute_names={
                    "#count": "request_count",
                    "#expires": "expires_at",
                },
                expression_attribute_values={
                    ":one": 1,
                    ":limit": self._limit,
                    ":expires": reset_at,
                },
                condition_expression="attribute_not_exists(#count) OR #count < :limit",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
                raise

            logger.info(
                "Upload rate limit reached",
                extra={"client_key": client_key, "window_start": window_start},
            )
            return RateLimitDecision(allowed=False, retry_after=max(reset_at - now, 1))

        return RateLimitDecision(allowed=True)
