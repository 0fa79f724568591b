"""Fake DeliveryMetrics for testing.

Records all calls in memory so tests can assert on pipeline health
without reaching into prometheus-client internals.
"""

from dataclasses import dataclass


@dataclass
class DeliveryRecord:
    """Single observed delivery attempt."""

    metric: str
    outcome: str
    duration: float


class FakeDeliveryMetrics:
    """In-memory spy implementing the DeliveryMetrics protocol.

    Usage:
        fake = FakeDeliveryMetrics()
        # … inject into client / instrumentor …
        assert fake.outcomes("latency_ms") == ["success"]
    """

    def __init__(self) -> None:
        self.deliveries: list[DeliveryRecord] = []
        self.computation_errors: dict[str, int] = {}

    def observe_delivery(self, metric: str, outcome: str, duration: float) -> None:
        self.deliveries.append(DeliveryRecord(metric, outcome, duration))

    def inc_computation_error(self, function: str) -> None:
        self.computation_errors[function] = self.computation_errors.get(function, 0) + 1

    # -- test helpers --

    def outcomes(self, metric: str) -> list[str]:
        return [d.outcome for d in self.deliveries if d.metric == metric]

    def clear(self) -> None:
        """Reset all recorded state."""
        self.deliveries.clear()
        self.computation_errors.clear()
