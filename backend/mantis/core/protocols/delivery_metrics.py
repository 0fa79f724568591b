"""DeliveryMetrics protocol for observing the metrics pipeline itself.

Delivery and computation failures are swallowed on the request path, so
this hook is how operators see them. Production uses Prometheus; tests
inject a fake that records calls in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DeliveryMetrics(Protocol):
    """Protocol for metrics about metric delivery."""

    def observe_delivery(self, metric: str, outcome: str, duration: float) -> None:
        """Record one delivery attempt.

        Args:
            metric: Name of the metric that was sent.
            outcome: ``success`` or ``failure``.
            duration: Wall time of the outbound call in seconds.
        """
        ...

    def inc_computation_error(self, function: str) -> None:
        """Record a metric function that raised."""
        ...
