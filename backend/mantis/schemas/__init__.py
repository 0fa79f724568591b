"""Pydantic schemas and value objects."""

from mantis.schemas.auth import (
    ApiKeyCredential,
    AuthCredential,
    OAuthCredential,
    resolve_credential,
)
from mantis.schemas.metric import MetricObservation, RequestView, ResponseView

__all__ = [
    "ApiKeyCredential",
    "AuthCredential",
    "MetricObservation",
    "OAuthCredential",
    "RequestView",
    "ResponseView",
    "resolve_credential",
]
