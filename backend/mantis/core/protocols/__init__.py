"""Core protocols for dependency injection."""

from mantis.core.protocols.delivery_metrics import DeliveryMetrics
from mantis.core.protocols.metric_function import MetricFunction, MetricResult
from mantis.core.protocols.metric_transport import MetricTransport

__all__ = [
    "DeliveryMetrics",
    "MetricFunction",
    "MetricResult",
    "MetricTransport",
]
