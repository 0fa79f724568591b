"""Exceptions raised and logged by mantis.

Only ``ConfigurationError`` ever reaches a caller, and only at construction
time. ``DeliveryError`` and ``MetricComputationError`` are built so that
failures on the metrics side channel are logged with a consistent shape;
they are never raised into the instrumented service.
"""

from typing import Optional


class MantisException(Exception):
    """Base exception for mantis."""

    def __init__(self, message: Optional[str] = "A mantis error occurred."):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(MantisException):
    """Raised when a client or middleware is constructed without valid credentials."""

    def __init__(
        self,
        message: Optional[str] = (
            "Either an API key or an OAuth token with provider must be provided."
        ),
    ):
        super().__init__(message)


class DeliveryError(MantisException):
    """Sending a metric to the collection endpoint failed."""

    def __init__(self, metric: str, cause: BaseException):
        self.metric = metric
        self.cause = cause
        super().__init__(f"Failed to deliver metric '{metric}': {cause!r}")


class MetricComputationError(MantisException):
    """A metric function raised while computing its observation."""

    def __init__(self, function: str, cause: BaseException):
        self.function = function
        self.cause = cause
        super().__init__(f"Metric function '{function}' failed: {cause!r}")
