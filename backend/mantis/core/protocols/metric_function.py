"""MetricFunction protocol for pluggable per-request metrics."""

from typing import Any, Awaitable, Mapping, Optional, Protocol, Union, runtime_checkable

from mantis.schemas.metric import MetricObservation, RequestView, ResponseView

MetricResult = Optional[Union[MetricObservation, Mapping[str, Any]]]


@runtime_checkable
class MetricFunction(Protocol):
    """Computes at most one observation for a finished request.

    ``start_marker`` is the ``time.perf_counter_ns()`` value captured when
    the request arrived. Returning ``None`` means nothing is sent for this
    request. A mapping with ``name`` and ``value`` keys is accepted in place
    of a ``MetricObservation``.

    Plain (non-async) callables are accepted by the instrumentor as well.
    """

    def __call__(
        self,
        request: RequestView,
        response: ResponseView,
        start_marker: int,
    ) -> Union[Awaitable[MetricResult], MetricResult]: ...
