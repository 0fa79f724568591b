"""aiohttp implementation of the MetricTransport protocol.

One ``POST {api_url}/metrics`` per metric, authenticated with either an
API key or an OAuth bearer token. Delivery is best effort: failures are
logged and counted, never raised, and never retried.
"""

import time
from typing import Optional, Union

import aiohttp

from mantis.core.config import settings
from mantis.core.exceptions import DeliveryError
from mantis.core.logging import logger
from mantis.core.protocols.delivery_metrics import DeliveryMetrics
from mantis.core.protocols.metric_transport import MetricTransport
from mantis.core.shared_models import AuthProvider, DeliveryOutcome
from mantis.schemas.auth import AuthCredential, resolve_credential


class MantisClient(MetricTransport):
    """Client for the Mantis metrics backend."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        token: Optional[str] = None,
        auth_provider: Optional[Union[str, AuthProvider]] = None,
        api_url: Optional[str] = None,
        *,
        credential: Optional[AuthCredential] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        delivery_metrics: Optional[DeliveryMetrics] = None,
    ):
        """Initialize the client with either an API key or an OAuth token.

        Args:
            api_key: API key for accounts using username/password login.
            token: OAuth token for accounts logging in via Google/GitHub.
            auth_provider: The OAuth provider, ``google`` or ``github``.
            api_url: Backend base URL. Defaults to ``settings.MANTIS_API_URL``.
            credential: An already resolved credential; takes precedence over
                the raw options.
            timeout: Total timeout in seconds for each delivery call.
            session: Shared aiohttp session. When omitted the client creates
                and owns one.
            delivery_metrics: Optional hook counting delivery outcomes.

        Raises:
            ConfigurationError: if no valid credential variant is supplied.
        """
        self.credential = credential or resolve_credential(api_key, token, auth_provider)
        self.api_url = (api_url or settings.MANTIS_API_URL).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout or settings.MANTIS_REQUEST_TIMEOUT)
        self._session = session
        self._owns_session = session is None
        self._delivery_metrics = delivery_metrics
        self.logger = logger.with_context(
            component="metric_transport",
            api_url=self.api_url,
            auth_method=type(self.credential).__name__,
        )

    @property
    def metrics_url(self) -> str:
        return f"{self.api_url}/metrics"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def send_metric(self, name: str, value: float) -> None:
        """Send a metric to the Mantis backend.

        Args:
            name: The name of the metric (e.g. ``requests_per_second``).
            value: The value of the metric.
        """
        started = time.perf_counter()
        try:
            session = self._get_session()
            async with session.post(
                self.metrics_url,
                json={"metric": name, "value": value},
                headers=self.credential.headers(),
                timeout=self._timeout,
            ) as response:
                response.raise_for_status()
        except Exception as e:
            error = DeliveryError(name, e)
            self.logger.warning(error.message, extra={"dimensions": {"metric": name}})
            self._observe(name, DeliveryOutcome.FAILURE, started)
            return

        self._observe(name, DeliveryOutcome.SUCCESS, started)
        self.logger.debug(f"Successfully sent metric: {name}={value}")

    def _observe(self, name: str, outcome: DeliveryOutcome, started: float) -> None:
        if self._delivery_metrics is None:
            return
        try:
            self._delivery_metrics.observe_delivery(
                name, outcome.value, time.perf_counter() - started
            )
        except Exception as e:
            self.logger.warning(f"Failed to record delivery outcome for '{name}': {e}")

    async def aclose(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "MantisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
