"""Schemas package - wire payloads and internal value objects."""

from error_relay.schemas.internal import FailureEvent, RequestSnapshot
from error_relay.schemas.payloads import (
    ClientErrorResponse,
    DiagnosticPayload,
    InnerFailureSummary,
)

__all__ = [
    "ClientErrorResponse",
    "DiagnosticPayload",
    "FailureEvent",
    "InnerFailureSummary",
    "RequestSnapshot",
]
