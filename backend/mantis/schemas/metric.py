"""Metric observations and the request/response views metric functions see."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import Headers


class MetricObservation(BaseModel):
    """A single named value produced for one request.

    NaN and infinity are accepted; they are delivered as-is.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    value: float


@dataclass(frozen=True)
class RequestView:
    """What a metric function can see of the inbound request."""

    method: str
    path: str
    headers: Headers
    client: Optional[str] = None
    scope: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "RequestView":
        client = scope.get("client")
        return cls(
            method=scope.get("method", ""),
            path=scope.get("path", ""),
            headers=Headers(raw=list(scope.get("headers") or [])),
            client=client[0] if client else None,
            scope=scope,
        )


@dataclass(frozen=True)
class ResponseView:
    """What a metric function can see of the finished response.

    ``completed`` is False when the handler raised or the client went away
    before the final body chunk was sent. ``end_marker`` is the
    ``time.perf_counter_ns()`` value taken when the response finished; the
    instrumentor fills it in when the binding leaves it unset.
    """

    status_code: int
    headers: Headers = field(default_factory=Headers)
    body_size: int = 0
    completed: bool = True
    end_marker: Optional[int] = None
