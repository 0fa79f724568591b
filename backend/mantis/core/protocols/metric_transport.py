"""MetricTransport protocol for delivering observations.

The instrumentor depends on this protocol rather than on the aiohttp
client. Production uses ``MantisClient``; tests inject a fake that records
sent metrics in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricTransport(Protocol):
    """Protocol for sending one metric to the collection backend."""

    async def send_metric(self, name: str, value: float) -> None:
        """Deliver a single metric.

        Implementations must never raise: every failure is logged and
        swallowed so that telemetry cannot affect request handling.

        Args:
            name: Metric name, e.g. ``latency_ms``.
            value: Metric value.
        """
        ...

    async def aclose(self) -> None:
        """Release any network resources held by the transport."""
        ...
