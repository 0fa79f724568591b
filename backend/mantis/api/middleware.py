"""ASGI middleware binding the instrumentor to any ASGI application.

    app = FastAPI()
    app.add_middleware(MantisMiddleware, api_key="...")

The wrapped app is called immediately; the completion hook fires right
after the final body chunk or a ``http.response.pathsend`` message has
been sent, or once on the way out if the handler raised or the client
disconnected first. Metric evaluation runs as a background task and is
never awaited on the response path.
"""

from collections.abc import Sequence
from typing import Any, Optional, Union

from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mantis.core.instrumentor import RequestInstrumentor
from mantis.core.metric_state import ProcessMetricState
from mantis.core.protocols.delivery_metrics import DeliveryMetrics
from mantis.core.protocols.metric_function import MetricFunction
from mantis.core.protocols.metric_transport import MetricTransport
from mantis.core.shared_models import AuthProvider
from mantis.schemas.auth import resolve_credential
from mantis.schemas.metric import RequestView, ResponseView

# Reported when the handler raised before starting a response.
_UNHANDLED_ERROR_STATUS = 500


def _content_length(headers: Headers) -> int:
    try:
        return max(int(headers.get("content-length", 0)), 0)
    except ValueError:
        return 0


class MantisMiddleware:
    """Pure ASGI middleware sending per-request metrics to Mantis."""

    def __init__(
        self,
        app: ASGIApp,
        api_key: Optional[str] = None,
        token: Optional[str] = None,
        auth_provider: Optional[Union[str, AuthProvider]] = None,
        api_url: Optional[str] = None,
        *,
        metrics: Optional[Sequence[MetricFunction]] = None,
        instrumentor: Optional[RequestInstrumentor] = None,
        transport: Optional[MetricTransport] = None,
        state: Optional[ProcessMetricState] = None,
        delivery_metrics: Optional[DeliveryMetrics] = None,
        timeout: Optional[float] = None,
        metric_timeout: Optional[float] = None,
    ) -> None:
        self.app = app
        self.instrumentor = instrumentor or RequestInstrumentor(
            api_key,
            token,
            auth_provider,
            api_url,
            metrics=metrics,
            transport=transport,
            state=state,
            delivery_metrics=delivery_metrics,
            timeout=timeout,
            metric_timeout=metric_timeout,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        instrumentor = self.instrumentor
        handle = instrumentor.begin(RequestView.from_scope(scope))
        status_code: Optional[int] = None
        headers = Headers()
        body_size = 0

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, headers, body_size
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = Headers(raw=list(message.get("headers", [])))
            await send(message)
            if message["type"] == "http.response.body":
                body_size += len(message.get("body", b""))
                final = not message.get("more_body", False)
            elif message["type"] == "http.response.pathsend":
                # The server streams the file itself; content-length is all we see.
                body_size = _content_length(headers)
                final = True
            else:
                final = False
            if final:
                instrumentor.complete(
                    handle,
                    ResponseView(
                        status_code=status_code or _UNHANDLED_ERROR_STATUS,
                        headers=headers,
                        body_size=body_size,
                    ),
                )

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            # No-op when the final body chunk already fired the hook.
            instrumentor.complete(
                handle,
                ResponseView(
                    status_code=status_code or _UNHANDLED_ERROR_STATUS,
                    headers=headers,
                    body_size=body_size,
                    completed=False,
                ),
            )


def mantis_middleware(**options: Any) -> Middleware:
    """Build a ``Middleware`` entry for ``Starlette(middleware=[...])``.

    Credentials are checked here, at setup time, rather than when the
    application first builds its middleware stack.

    Raises:
        ConfigurationError: if no valid credential variant is supplied.
    """
    if options.get("instrumentor") is None:
        resolve_credential(
            options.get("api_key"),
            options.get("token"),
            options.get("auth_provider"),
        )
    return Middleware(MantisMiddleware, **options)
