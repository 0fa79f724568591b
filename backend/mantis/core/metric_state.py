"""Process-wide running counters shared by every instrumented request.

The counters are plain attributes mutated only through ``record_request``
and ``record_error``. Under a single event loop each increment is atomic
with respect to other coroutines, but a read-compute-send sequence is not:
another request may bump a counter in between. Values are approximate
telemetry, so no lock is taken.

Counters are cumulative for the lifetime of the object; the throughput
window is never reset.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable


@dataclass(frozen=True)
class MetricStateSnapshot:
    """Point-in-time copy of the counters."""

    total_requests: int
    total_errors: int
    elapsed_seconds: float
    started_at: datetime


class ProcessMetricState:
    """Running request/error counters and the throughput window start."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._total_requests = 0
        self._total_errors = 0
        self.window_start: float = clock()
        self.started_at: datetime = datetime.now(timezone.utc)

    @property
    def total_requests(self) -> int:
        return self._total_requests

    @property
    def total_errors(self) -> int:
        return self._total_errors

    def record_request(self) -> int:
        """Count one arrived request and return the new total."""
        self._total_requests += 1
        return self._total_requests

    def record_error(self) -> int:
        """Count one error response and return the new total."""
        self._total_errors += 1
        return self._total_errors

    def elapsed_seconds(self) -> float:
        return max(self._clock() - self.window_start, 0.0)

    def requests_per_second(self) -> float:
        """Requests received per second since the window start.

        When no measurable time has passed the total request count is
        returned instead of dividing by zero.
        """
        elapsed = self.elapsed_seconds()
        if elapsed <= 0:
            return float(self._total_requests)
        return self._total_requests / elapsed

    def error_rate(self) -> float:
        """Percentage of received requests that ended with status >= 400."""
        if self._total_requests == 0:
            return 0.0
        return (self._total_errors / self._total_requests) * 100

    def snapshot(self) -> MetricStateSnapshot:
        return MetricStateSnapshot(
            total_requests=self._total_requests,
            total_errors=self._total_errors,
            elapsed_seconds=self.elapsed_seconds(),
            started_at=self.started_at,
        )
