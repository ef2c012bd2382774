"""structlog setup for the relay.

Every entry is tagged with the service name. Failure entries logged with
``exc_info`` get ``error_type``/``error_message`` filled in, so the
middleware's ``error.unhandled`` lines and the reporter's
``error_report.*`` lines can be filtered on the same keys. Empty failure
fields such as an unresolved ``board_id`` are dropped.
"""

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor

from error_relay.observability.constants import SERVICE_NAME

LOG_FORMATS = frozenset({"json", "console"})

# Keys that are noise when a failure carries no value for them
_OPTIONAL_FAILURE_KEYS = ("board_id", "endpoint", "error_message")

# Libraries that log every outbound report or inbound request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def add_service_name(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Tag the entry with the relay's service name."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def add_failure_fields(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Derive ``error_type`` and ``error_message`` from an ``exc_info`` exception.

    Explicit values passed by the caller are kept.
    """
    exc_info = event_dict.get("exc_info")
    if exc_info is True:
        exc = sys.exc_info()[1]
    elif isinstance(exc_info, BaseException):
        exc = exc_info
    elif isinstance(exc_info, tuple):
        exc = exc_info[1]
    else:
        exc = None

    if exc is not None:
        event_dict.setdefault("error_type", type(exc).__name__)
        event_dict.setdefault("error_message", str(exc))
    return event_dict


def drop_empty_failure_fields(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Remove optional failure keys whose value is None or blank."""
    for key in _OPTIONAL_FAILURE_KEYS:
        if key in event_dict and event_dict[key] in (None, ""):
            del event_dict[key]
    return event_dict


def build_processors(log_format: str = "json", development_mode: bool = False) -> list[Processor]:
    """Return the processor chain for the given output format.

    Raises:
        ValueError: If ``log_format`` is not ``json`` or ``console``.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}; expected one of {sorted(LOG_FORMATS)}")

    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_failure_fields,
        drop_empty_failure_fields,
    ]

    if development_mode or log_format == "console":
        return [*chain, structlog.dev.ConsoleRenderer(colors=True)]

    return [
        *chain,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    development_mode: bool = False,
) -> None:
    """Route structlog through stdlib logging to stdout.

    Args:
        log_level: Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for production, "console" for development.
        development_mode: Forces colored console output.
    """
    structlog.configure(
        processors=build_processors(log_format, development_mode),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)
