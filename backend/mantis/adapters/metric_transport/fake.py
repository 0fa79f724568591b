"""Fake MetricTransport for testing.

Records every sent metric in memory so tests can assert on what the
instrumentor dispatched without a network.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from mantis.core.protocols.metric_transport import MetricTransport


@dataclass
class SentMetric:
    """Single metric handed to the transport."""

    name: str
    value: float


class FakeMetricTransport(MetricTransport):
    """In-memory spy implementing the MetricTransport protocol.

    ``fail_with`` makes every send raise, which a real transport never
    does; it exists to prove the instrumentor survives a misbehaving
    transport. ``delay`` suspends each send to simulate a slow backend.
    """

    def __init__(self, fail_with: Optional[BaseException] = None, delay: float = 0.0) -> None:
        self.sent: list[SentMetric] = []
        self.fail_with = fail_with
        self.delay = delay
        self.closed = False

    async def send_metric(self, name: str, value: float) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentMetric(name, value))

    async def aclose(self) -> None:
        self.closed = True

    # -- test helpers --

    @property
    def names(self) -> list[str]:
        return [m.name for m in self.sent]

    def values_for(self, name: str) -> list[float]:
        return [m.value for m in self.sent if m.name == name]

    def clear(self) -> None:
        """Reset all recorded state."""
        self.sent.clear()
        self.closed = False
