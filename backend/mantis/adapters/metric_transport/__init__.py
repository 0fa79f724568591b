"""Metric transport adapters."""

from mantis.adapters.metric_transport.fake import FakeMetricTransport, SentMetric
from mantis.adapters.metric_transport.mantis import MantisClient

__all__ = ["MantisClient", "FakeMetricTransport", "SentMetric"]
