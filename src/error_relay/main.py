"""Main FastAPI application for the error relay service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from error_relay.api import health_router
from error_relay.clients import ErrorReporter
from error_relay.core.config import get_settings
from error_relay.observability import configure_logging, get_logger
from error_relay.observability.constants import LogEvents
from error_relay.observability.middleware import RuntimeErrorMiddleware

logger = get_logger(__name__)


@lru_cache
def get_error_reporter() -> ErrorReporter:
    """Get the error reporter singleton."""
    settings = get_settings()
    return ErrorReporter(timeout=settings.error_report_timeout)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format if not settings.debug else "console",
        development_mode=settings.debug,
    )
    logger.info(
        LogEvents.SERVICE_STARTED,
        service_name=settings.service_name,
        debug=settings.debug,
    )

    yield

    await get_error_reporter().aclose()
    logger.info(LogEvents.SERVICE_STOPPED, service_name=settings.service_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Error Relay",
        description="""
Unhandled-exception interceptor with diagnostic forwarding.

Any exception escaping a route is answered with a JSON 500 carrying a
generic message and the exception text. When `RUNTIME_ERROR_ENDPOINT_URL`
is set, a diagnostic report (stack trace, source line, board id, request
metadata) is POSTed to that URL in the background.
        """,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Middleware executes in reverse order of addition; CORS must wrap the
    # error middleware so JSON 500 responses still carry CORS headers
    app.add_middleware(RuntimeErrorMiddleware, reporter=get_error_reporter())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)  # /health, /ready

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "error_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
