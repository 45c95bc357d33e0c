"""CloudWatch EMF implementation of AnalyticsSink."""

import json
from typing import Any

from aws_lambda_powertools.metrics import MetricUnit, single_metric

from core.repositories.analytics_sink import AnalyticsSink
from core.utils.config import Settings

ANALYTICS_METRIC_NAME = "AnalyticsEvent"


class MetricsAnalyticsSink(AnalyticsSink):
    """Emits each blob as a single EMF metric with the blob as metadata."""

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace

    @classmethod
    def from_settings(cls, settings: Settings) -> "MetricsAnalyticsSink | None":
        """Return a sink, or None when no analytics namespace is configured."""
        if not settings.analytics_namespace:
            return None
        return cls(settings.analytics_namespace)

    def write(self, blob: dict[str, Any]) -> None:
        with single_metric(
            name=ANALYTICS_METRIC_NAME,
            unit=MetricUnit.Count,
            value=1,
            namespace=self._namespace,
        ) as metric:
            metric.add_dimension(name="type", value=str(blob.get("type", "unknown")))
            if blob.get("event"):
                metric.add_dimension(name="event", value=str(blob["event"]))
            metric.add_metadata(key="blob", value=json.dumps(blob, default=str))
