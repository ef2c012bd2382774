"""ASGI middleware that converts unhandled exceptions into JSON 500 responses.

When a collector endpoint is configured, the failure is also reported to it
in the background.

Pure ASGI middleware: the reporter sees the exception with the chain the
route raised it with.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from error_relay.clients.error_reporter import ErrorReporter
from error_relay.core.config import configured_endpoint_url
from error_relay.observability.constants import LogEvents
from error_relay.observability.logger import get_logger
from error_relay.schemas.internal import RequestSnapshot
from error_relay.schemas.payloads import ClientErrorResponse

logger = get_logger(__name__)

EndpointProvider = Callable[[], str | None]


class RuntimeErrorMiddleware:
    """Catches unhandled exceptions and answers with a generic JSON 500.

    On failure the middleware:
    1. Logs the exception with request method and path
    2. Reads the collector endpoint URL (at failure time, not at startup)
    3. Schedules a background diagnostic report if the URL is non-blank
    4. Returns ``{"error": ..., "message": str(exc)}`` with status 500

    Successful responses pass through untouched. If the downstream app had
    already started its response, the exception is re-raised to the server.
    """

    def __init__(
        self,
        app: ASGIApp,
        reporter: ErrorReporter | None = None,
        endpoint_provider: EndpointProvider | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            reporter: Delivers diagnostic reports; a default one is created if omitted.
            endpoint_provider: Returns the collector URL or None. Defaults to
                re-reading ``RUNTIME_ERROR_ENDPOINT_URL`` on every failure.
        """
        self.app = app
        self.reporter = reporter or ErrorReporter()
        self.endpoint_provider = endpoint_provider or configured_endpoint_url

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            # Router has filled scope["path_params"] by now
            request = Request(scope, receive)
            logger.error(
                LogEvents.ERROR_UNHANDLED,
                path=request.url.path,
                method=request.method,
                error_type=type(exc).__name__,
                error_message=str(exc),
                exc_info=True,
            )
            if response_started:
                raise

            response = self._handle_exception(request, exc)
            await response(scope, receive, send)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        occurred_at = datetime.now(timezone.utc)

        endpoint_url = self._resolve_endpoint()
        if endpoint_url:
            try:
                snapshot = RequestSnapshot.from_request(request)
                self.reporter.report(endpoint_url, snapshot, exc, occurred_at=occurred_at)
            except Exception as report_exc:
                logger.error(
                    LogEvents.ERROR_REPORT_SCHEDULE_FAILED,
                    endpoint=endpoint_url,
                    error=str(report_exc),
                )

        body = ClientErrorResponse(message=str(exc))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    def _resolve_endpoint(self) -> str | None:
        try:
            url = self.endpoint_provider()
        except Exception as config_exc:
            logger.error(LogEvents.CONFIG_READ_FAILED, error=str(config_exc))
            return None

        if url is None or not url.strip():
            return None
        return url.strip()
