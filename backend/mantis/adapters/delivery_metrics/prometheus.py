"""Prometheus implementation of the DeliveryMetrics protocol.

Creates a dedicated CollectorRegistry so delivery metrics are isolated
from the default global registry and from whatever the instrumented
service registers itself.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from mantis.core.protocols.delivery_metrics import DeliveryMetrics

_DELIVERY_DURATION_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)


class PrometheusDeliveryMetrics(DeliveryMetrics):
    """Prometheus-backed metrics about metric delivery."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._deliveries_total = Counter(
            "mantis_metric_deliveries_total",
            "Metric delivery attempts to the Mantis backend",
            ["metric", "outcome"],
            registry=self._registry,
        )

        self._delivery_duration = Histogram(
            "mantis_metric_delivery_duration_seconds",
            "Duration of metric delivery calls in seconds",
            ["metric"],
            buckets=_DELIVERY_DURATION_BUCKETS,
            registry=self._registry,
        )

        self._computation_errors = Counter(
            "mantis_metric_computation_errors_total",
            "Metric functions that raised while computing an observation",
            ["function"],
            registry=self._registry,
        )

    # -- DeliveryMetrics protocol methods --

    def observe_delivery(self, metric: str, outcome: str, duration: float) -> None:
        self._deliveries_total.labels(metric=metric, outcome=outcome).inc()
        self._delivery_duration.labels(metric=metric).observe(duration)

    def inc_computation_error(self, function: str) -> None:
        self._computation_errors.labels(function=function).inc()

    # -- exposition --

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def generate(self) -> bytes:
        return generate_latest(self._registry)
