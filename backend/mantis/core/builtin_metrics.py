"""Built-in metric functions: latency, throughput and error rate.

Each is a small callable object satisfying ``MetricFunction``. Throughput
and error rate read the shared ``ProcessMetricState`` they were built with.
"""

import time
from typing import Optional

from mantis.core.metric_state import ProcessMetricState
from mantis.core.shared_models import (
    ERROR_RATE_METRIC,
    LATENCY_METRIC,
    REQUESTS_PER_SECOND_METRIC,
)
from mantis.schemas.metric import MetricObservation, RequestView, ResponseView


class LatencyMetric:
    """Milliseconds from request arrival to response completion, on the monotonic clock.

    Falls back to the current time when the response carries no end marker.
    """

    name = LATENCY_METRIC

    async def __call__(
        self, request: RequestView, response: ResponseView, start_marker: int
    ) -> Optional[MetricObservation]:
        end_marker = response.end_marker
        if end_marker is None:
            end_marker = time.perf_counter_ns()
        elapsed_ns = max(end_marker - start_marker, 0)
        return MetricObservation(name=self.name, value=elapsed_ns / 1e6)


class RequestsPerSecondMetric:
    """Total received requests divided by seconds since the window start."""

    name = REQUESTS_PER_SECOND_METRIC

    def __init__(self, state: ProcessMetricState) -> None:
        self._state = state

    async def __call__(
        self, request: RequestView, response: ResponseView, start_marker: int
    ) -> Optional[MetricObservation]:
        return MetricObservation(name=self.name, value=self._state.requests_per_second())


class ErrorRateMetric:
    """Percentage of received requests that ended in an error response."""

    name = ERROR_RATE_METRIC

    def __init__(self, state: ProcessMetricState) -> None:
        self._state = state

    async def __call__(
        self, request: RequestView, response: ResponseView, start_marker: int
    ) -> Optional[MetricObservation]:
        return MetricObservation(name=self.name, value=self._state.error_rate())


def builtin_metrics(
    state: ProcessMetricState,
) -> tuple[LatencyMetric, RequestsPerSecondMetric, ErrorRateMetric]:
    """The built-ins in evaluation order."""
    return (LatencyMetric(), RequestsPerSecondMetric(state), ErrorRateMetric(state))
