"""Clients package - HTTP clients for external services."""

from error_relay.clients.error_reporter import ErrorReporter, build_payload

__all__ = [
    "ErrorReporter",
    "build_payload",
]
