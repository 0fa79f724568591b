"""Contextual logging for mantis.

``logger`` is the package-wide entry point. Components bind their own
dimensions once and log through the child:

    log = logger.with_context(component="metric_transport", api_url=url)
    log.warning("Delivery failed")

Dimensions are attached to every record as ``extra`` fields and rendered
as ``key=value`` pairs after the message.
"""

import logging
import sys
from typing import Any, MutableMapping

from mantis.core.config import settings

_LOGGER_NAME = "mantis"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(dimensions_text)s"


class _DimensionsFormatter(logging.Formatter):
    """Append the bound dimensions to the formatted line."""

    def format(self, record: logging.LogRecord) -> str:
        dimensions = getattr(record, "dimensions", None) or {}
        record.dimensions_text = (
            " [" + " ".join(f"{k}={v}" for k, v in dimensions.items()) + "]" if dimensions else ""
        )
        return super().format(record)


class ContextualLogger(logging.LoggerAdapter):
    """LoggerAdapter carrying a dict of dimensions."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None):
        super().__init__(logger, {})
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.get("dimensions", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


class LoggerConfigurator:
    """Builds the package logger once."""

    @staticmethod
    def configure_logger(name: str, dimensions: dict[str, Any] | None = None) -> ContextualLogger:
        base = logging.getLogger(name)
        base.setLevel(settings.LOG_LEVEL.upper())
        if not base.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(_DimensionsFormatter(_FORMAT))
            base.addHandler(handler)
        return ContextualLogger(base, dimensions)


logger = LoggerConfigurator.configure_logger(_LOGGER_NAME)
