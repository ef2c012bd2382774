"""Fire-and-forget reporter that forwards unhandled failures to a collector.

Each report is delivered from its own asyncio task so the client response
never waits on the collector. Delivery failures are logged and dropped;
there is no retry and no persistence.
"""

import asyncio
from datetime import datetime

import httpx

from error_relay.correlation import extract_board_id
from error_relay.observability import get_logger
from error_relay.observability.constants import LogEvents
from error_relay.schemas.internal import FailureEvent, RequestSnapshot
from error_relay.schemas.payloads import DiagnosticPayload, InnerFailureSummary
from error_relay.stack_trace import extract_line_number

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 5.0


def build_payload(snapshot: RequestSnapshot, failure: FailureEvent) -> DiagnosticPayload:
    """Assemble the diagnostic report for a failed request.

    Args:
        snapshot: Request data copied at failure time.
        failure: The caught exception reduced to reportable fields.

    Returns:
        The payload to POST to the collector.
    """
    inner = None
    if failure.inner is not None:
        inner = InnerFailureSummary(
            message=failure.inner.message,
            type=failure.inner.exception_type,
            stack_trace=failure.inner.stack_trace,
        )

    return DiagnosticPayload(
        board_id=extract_board_id(snapshot),
        timestamp=failure.occurred_at,
        file=failure.source_file,
        line=extract_line_number(failure.stack_trace),
        stack_trace=failure.stack_trace,
        message=failure.message,
        exception_type=failure.exception_type,
        request_path=snapshot.path,
        request_method=snapshot.method,
        user_agent=snapshot.user_agent,
        inner_exception=inner,
    )


class ErrorReporter:
    """Async HTTP client that POSTs diagnostic reports to a collector endpoint.

    All reporting is fire-and-forget via asyncio.create_task() so it never
    blocks the main request flow. Failures in reporting are logged but
    silently swallowed.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        # httpx limits each connect/read/write step; deadline bounds the whole call
        self.timeout = httpx.Timeout(timeout)
        self.deadline = timeout
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> frozenset[asyncio.Task[bool]]:
        """Reports scheduled but not yet finished."""
        return frozenset(self._tasks)

    def report(
        self,
        endpoint_url: str,
        snapshot: RequestSnapshot,
        exc: BaseException,
        occurred_at: datetime | None = None,
    ) -> asyncio.Task[bool] | None:
        """Schedule a diagnostic report to be sent asynchronously.

        This method returns immediately. The actual HTTP call happens
        in a background task so it never blocks the caller.

        Returns:
            The scheduled task, or None when no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running event loop (e.g. called from sync code); log and skip
            logger.debug(LogEvents.ERROR_REPORT_NO_EVENT_LOOP, error_type=type(exc).__name__)
            return None

        task = loop.create_task(self.deliver(endpoint_url, snapshot, exc, occurred_at))
        # The loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug(LogEvents.ERROR_REPORT_SCHEDULED, endpoint=endpoint_url)
        return task

    async def deliver(
        self,
        endpoint_url: str,
        snapshot: RequestSnapshot,
        exc: BaseException,
        occurred_at: datetime | None = None,
    ) -> bool:
        """Build and send one report. Swallows all exceptions.

        Returns:
            True if the collector answered with a 2xx status.
        """
        try:
            failure = FailureEvent.from_exception(exc, occurred_at=occurred_at)
            payload = build_payload(snapshot, failure)
        except Exception as build_exc:
            logger.error(
                LogEvents.ERROR_REPORT_FAILED,
                endpoint=endpoint_url,
                stage="build",
                exc_info=build_exc,
            )
            return False

        log = logger.bind(board_id=payload.board_id, endpoint=endpoint_url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await asyncio.wait_for(
                    client.post(endpoint_url, json=payload.to_wire()),
                    timeout=self.deadline,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as timeout_exc:
            log.warning(
                LogEvents.ERROR_REPORT_TIMEOUT,
                deadline_seconds=self.deadline,
                error_type=type(timeout_exc).__name__,
            )
            return False
        except Exception as send_exc:
            # Never let error reporting break the application
            log.error(
                LogEvents.ERROR_REPORT_FAILED,
                stage="send",
                error_type=type(send_exc).__name__,
                error=str(send_exc),
            )
            return False

        if response.is_success:
            log.info(LogEvents.ERROR_REPORT_SENT, status_code=response.status_code)
            return True

        log.warning(LogEvents.ERROR_REPORT_REJECTED, status_code=response.status_code)
        return False

    async def aclose(self) -> None:
        """Cancel reports still in flight. Their results are discarded."""
        tasks = list(self._tasks)
        if not tasks:
            return

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(LogEvents.ERROR_REPORT_CANCELLED, count=len(tasks))
