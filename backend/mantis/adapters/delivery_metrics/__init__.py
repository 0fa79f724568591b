"""Delivery metrics adapters."""

from mantis.adapters.delivery_metrics.fake import FakeDeliveryMetrics
from mantis.adapters.delivery_metrics.prometheus import PrometheusDeliveryMetrics

__all__ = ["PrometheusDeliveryMetrics", "FakeDeliveryMetrics"]
