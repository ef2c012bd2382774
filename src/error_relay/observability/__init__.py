"""Observability layer for error-relay.

This module provides structured logging and the middleware that turns
unhandled exceptions into JSON 500 responses plus diagnostic reports.

Usage:
    from error_relay.observability import get_logger

    logger = get_logger(__name__)
    logger.info("error_report.sent", status_code=202)

Note:
    RuntimeErrorMiddleware is not exported here to avoid circular imports;
    import it from error_relay.observability.middleware.
"""

from error_relay.observability.logger import configure_logging, get_logger

__all__ = [
    # Logger
    "configure_logging",
    "get_logger",
]
