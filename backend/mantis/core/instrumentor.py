"""Per-request metric collection and dispatch.

``RequestInstrumentor`` is framework-agnostic: a binding calls ``begin``
when a request arrives and ``complete`` once the response has been fully
sent. ``complete`` schedules evaluation as a background task and returns
immediately, so the response path never waits on metrics.

Evaluation order is fixed: caller-supplied functions in configured order,
then latency, requests-per-second and error rate. Each function is
isolated: one raising, or running past ``metric_timeout``, does not stop
the rest.
"""

import asyncio
import inspect
import time
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Optional, Union

from mantis.adapters.metric_transport.mantis import MantisClient
from mantis.core.builtin_metrics import builtin_metrics
from mantis.core.config import settings
from mantis.core.exceptions import DeliveryError, MetricComputationError
from mantis.core.logging import logger
from mantis.core.metric_state import ProcessMetricState
from mantis.core.protocols.delivery_metrics import DeliveryMetrics
from mantis.core.protocols.metric_function import MetricFunction, MetricResult
from mantis.core.protocols.metric_transport import MetricTransport
from mantis.core.shared_models import AuthProvider, DeliveryOutcome, RequestPhase
from mantis.schemas.auth import resolve_credential
from mantis.schemas.metric import MetricObservation, RequestView, ResponseView


def _function_name(function: MetricFunction) -> str:
    for attr in ("name", "__name__"):
        value = getattr(function, attr, None)
        if isinstance(value, str) and value:
            return value
    return type(function).__name__


def _to_observation(result: MetricResult) -> Optional[MetricObservation]:
    if result is None or isinstance(result, MetricObservation):
        return result
    if isinstance(result, Mapping):
        return MetricObservation.model_validate(dict(result))
    raise TypeError(f"Expected MetricObservation, mapping or None, got {type(result).__name__}")


class InFlightRequest:
    """Handle tying one request to its completion hook.

    Guards the hook and the error count so that each fires at most once,
    however many times the binding reports completion.
    """

    def __init__(self, request: RequestView, start_marker: int) -> None:
        self.request = request
        self.start_marker = start_marker
        self.end_marker: Optional[int] = None
        self.phase = RequestPhase.ARRIVED
        self._completed = False
        self._error_counted = False

    def mark_completed(self) -> bool:
        """Record the end marker and return True, the first time only."""
        if self._completed:
            return False
        self._completed = True
        self.end_marker = time.perf_counter_ns()
        self.phase = RequestPhase.COMPLETED
        return True

    def claim_error(self) -> bool:
        """Return True the first time only."""
        if self._error_counted:
            return False
        self._error_counted = True
        return True


class RequestInstrumentor:
    """Counts requests and errors, evaluates metric functions, and sends results."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        token: Optional[str] = None,
        auth_provider: Optional[Union[str, AuthProvider]] = None,
        api_url: Optional[str] = None,
        *,
        metrics: Optional[Sequence[MetricFunction]] = None,
        transport: Optional[MetricTransport] = None,
        state: Optional[ProcessMetricState] = None,
        delivery_metrics: Optional[DeliveryMetrics] = None,
        timeout: Optional[float] = None,
        metric_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the instrumentor.

        Credentials are validated even when a transport is injected.

        Args:
            api_key: API key credential.
            token: OAuth token credential.
            auth_provider: OAuth provider for ``token``.
            api_url: Backend base URL for the default transport.
            metrics: Caller-supplied metric functions, evaluated before the
                built-ins in the given order.
            transport: Where observations are sent. Defaults to a
                ``MantisClient`` built from the credential.
            state: Shared counters. Pass the same object to several
                instrumentors to aggregate them.
            delivery_metrics: Optional hook for delivery and computation
                failures.
            timeout: Delivery timeout for the default transport.
            metric_timeout: Seconds a single metric function may take.
                Defaults to ``settings.MANTIS_METRIC_TIMEOUT``.

        Raises:
            ConfigurationError: if no valid credential variant is supplied.
        """
        self.credential = resolve_credential(api_key, token, auth_provider)
        self.state = state or ProcessMetricState()
        self.delivery_metrics = delivery_metrics
        self.metric_timeout = metric_timeout or settings.MANTIS_METRIC_TIMEOUT
        self.transport: MetricTransport = transport or MantisClient(
            credential=self.credential,
            api_url=api_url,
            timeout=timeout,
            delivery_metrics=delivery_metrics,
        )
        self.custom_metrics: tuple[MetricFunction, ...] = tuple(metrics or ())
        self.metric_functions: tuple[MetricFunction, ...] = (
            *self.custom_metrics,
            *builtin_metrics(self.state),
        )
        self._tasks: set[asyncio.Task] = set()
        self.logger = logger.with_context(component="instrumentor")

    # -- request lifecycle --

    def begin(self, request: RequestView) -> InFlightRequest:
        """Capture the start marker and count the request. Never suspends."""
        handle = InFlightRequest(request, time.perf_counter_ns())
        self.state.record_request()
        handle.phase = RequestPhase.IN_FLIGHT
        return handle

    def complete(self, handle: InFlightRequest, response: ResponseView) -> Optional[asyncio.Task]:
        """One-shot completion hook.

        Schedules metric evaluation and returns the task on the first call;
        returns None on every later call. Must be called from a running
        event loop.
        """
        if not handle.mark_completed():
            return None
        if response.end_marker is None:
            response = replace(response, end_marker=handle.end_marker)
        task = asyncio.get_running_loop().create_task(self._run_completion(handle, response))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_completion(self, handle: InFlightRequest, response: ResponseView) -> None:
        try:
            await self.evaluate(handle.request, response, handle.start_marker, handle=handle)
        except Exception as e:
            self.logger.error(f"Mantis middleware error: {e}", exc_info=True)

    # -- evaluation --

    async def evaluate(
        self,
        request: RequestView,
        response: ResponseView,
        start_marker: int,
        handle: Optional[InFlightRequest] = None,
    ) -> list[MetricObservation]:
        """Count the error (if any), run every metric function, send results.

        Returns the observations handed to the transport, in order.
        """
        if handle is not None:
            handle.phase = RequestPhase.METRICS_EVALUATING

        if response.status_code >= 400 and (handle is None or handle.claim_error()):
            self.state.record_error()

        dispatched: list[MetricObservation] = []
        for function in self.metric_functions:
            observation = await self._compute(function, request, response, start_marker)
            if observation is None:
                continue
            await self._dispatch(observation)
            dispatched.append(observation)

        if handle is not None:
            handle.phase = RequestPhase.METRICS_DISPATCHED
        return dispatched

    async def _compute(
        self,
        function: MetricFunction,
        request: RequestView,
        response: ResponseView,
        start_marker: int,
    ) -> Optional[MetricObservation]:
        try:
            result = function(request, response, start_marker)
            if inspect.isawaitable(result):
                result = await asyncio.wait_for(result, timeout=self.metric_timeout)
            return _to_observation(result)
        except Exception as e:
            error = MetricComputationError(_function_name(function), e)
            self.logger.error(error.message, exc_info=True)
            if self.delivery_metrics is not None:
                self.delivery_metrics.inc_computation_error(error.function)
            return None

    async def _dispatch(self, observation: MetricObservation) -> None:
        # MetricTransport implementations swallow their own failures; this
        # catches the ones that do not.
        started = time.perf_counter()
        try:
            await self.transport.send_metric(observation.name, observation.value)
        except Exception as e:
            self.logger.warning(DeliveryError(observation.name, e).message)
            if self.delivery_metrics is not None:
                self.delivery_metrics.observe_delivery(
                    observation.name,
                    DeliveryOutcome.FAILURE.value,
                    time.perf_counter() - started,
                )

    # -- shutdown --

    @property
    def pending(self) -> int:
        """Number of completion tasks still running."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled completion task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain pending work, then close the transport."""
        await self.drain()
        await self.transport.aclose()
