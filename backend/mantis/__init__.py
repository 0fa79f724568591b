"""Request instrumentation that ships per-request metrics to Mantis."""

from mantis.adapters.metric_transport import MantisClient
from mantis.api.middleware import MantisMiddleware, mantis_middleware
from mantis.core.exceptions import (
    ConfigurationError,
    DeliveryError,
    MantisException,
    MetricComputationError,
)
from mantis.core.instrumentor import InFlightRequest, RequestInstrumentor
from mantis.core.metric_state import MetricStateSnapshot, ProcessMetricState
from mantis.core.protocols import DeliveryMetrics, MetricFunction, MetricTransport
from mantis.core.shared_models import AuthProvider, RequestPhase
from mantis.schemas import (
    ApiKeyCredential,
    MetricObservation,
    OAuthCredential,
    RequestView,
    ResponseView,
)

__all__ = [
    "ApiKeyCredential",
    "AuthProvider",
    "ConfigurationError",
    "DeliveryError",
    "DeliveryMetrics",
    "InFlightRequest",
    "MantisClient",
    "MantisException",
    "MantisMiddleware",
    "MetricComputationError",
    "MetricFunction",
    "MetricObservation",
    "MetricStateSnapshot",
    "MetricTransport",
    "OAuthCredential",
    "ProcessMetricState",
    "RequestInstrumentor",
    "RequestPhase",
    "RequestView",
    "ResponseView",
    "mantis_middleware",
]
