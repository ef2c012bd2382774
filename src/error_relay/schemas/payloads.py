"""Wire schemas: the client error body and the diagnostic report."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from error_relay.observability.constants import CLIENT_ERROR_MESSAGE


class ClientErrorResponse(BaseModel):
    """Body returned to the caller when a request fails.

    Deliberately limited to the generic message and the exception text.
    """

    error: str = Field(default=CLIENT_ERROR_MESSAGE, description="Generic error text")
    message: str = Field(..., description="Message of the unhandled exception")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class InnerFailureSummary(_CamelModel):
    """Chained exception summarized inside a diagnostic report."""

    message: str
    type: str
    stack_trace: str | None = None


class DiagnosticPayload(_CamelModel):
    """Report POSTed to the diagnostic collector."""

    board_id: str | None = Field(default=None, description="Correlation identifier")
    timestamp: datetime = Field(..., description="UTC time the failure was caught")
    file: str | None = Field(default=None, description="Source file of the innermost frame")
    line: int | None = Field(default=None, description="Best-effort source line")
    stack_trace: str | None = None
    message: str
    exception_type: str
    request_path: str
    request_method: str
    user_agent: str = ""
    inner_exception: InnerFailureSummary | None = None
