"""Constants for observability layer."""

# Service identifier for logs
SERVICE_NAME = "error-relay"

# Request locations searched for the board identifier
BOARD_ID_PARAM = "boardId"
BOARD_ID_HEADER = "X-Board-Id"

# Fixed text returned to clients for every unhandled failure
CLIENT_ERROR_MESSAGE = "An error occurred while processing your request"


# Log event names following the pattern: {domain}.{action}.{result}
class LogEvents:
    """Standardized log event names."""

    # Error events
    ERROR_UNHANDLED = "error.unhandled"

    # Diagnostic delivery events
    ERROR_REPORT_SCHEDULED = "error_report.scheduled"
    ERROR_REPORT_SENT = "error_report.sent"
    ERROR_REPORT_REJECTED = "error_report.rejected"
    ERROR_REPORT_TIMEOUT = "error_report.timeout"
    ERROR_REPORT_FAILED = "error_report.failed"
    ERROR_REPORT_NO_EVENT_LOOP = "error_report.no_event_loop"
    ERROR_REPORT_SCHEDULE_FAILED = "error_report.schedule.failed"
    ERROR_REPORT_CANCELLED = "error_report.cancelled"

    # Configuration events
    CONFIG_READ_FAILED = "config.read.failed"

    # Lifecycle events
    SERVICE_STARTED = "service.started"
    SERVICE_STOPPED = "service.stopped"
