"""Shared enums and constants."""

from enum import Enum


class AuthProvider(str, Enum):
    """OAuth providers accepted by the Mantis backend."""

    GOOGLE = "google"
    GITHUB = "github"


class RequestPhase(str, Enum):
    """Lifecycle of a single instrumented request."""

    ARRIVED = "arrived"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    METRICS_EVALUATING = "metrics_evaluating"
    METRICS_DISPATCHED = "metrics_dispatched"


class DeliveryOutcome(str, Enum):
    """Result label for a single metric delivery."""

    SUCCESS = "success"
    FAILURE = "failure"


LATENCY_METRIC = "latency_ms"
REQUESTS_PER_SECOND_METRIC = "requests_per_second"
ERROR_RATE_METRIC = "error_rate"
