"""Internal value objects captured when a request fails."""

import traceback
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_stack(exc: BaseException) -> str | None:
    """Format the traceback frames innermost first, so the raising frame leads."""
    if exc.__traceback__ is None:
        return None
    return "".join(reversed(traceback.format_tb(exc.__traceback__)))


def _source_file(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    frames = traceback.extract_tb(exc.__traceback__)
    return frames[-1].filename if frames else None


def _group(items: Iterable[tuple[str, str]]) -> dict[str, tuple[str, ...]]:
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return {key: tuple(values) for key, values in grouped.items()}


def chained_exception(exc: BaseException) -> BaseException | None:
    """Return the exception this one was raised from or while handling.

    An explicit ``raise ... from cause`` wins; otherwise the implicit context
    is used unless it was suppressed with ``from None``.
    """
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


class RequestSnapshot(BaseModel):
    """Read-only copy of the parts of a request that diagnostics need.

    Taken synchronously while the request is still live so the reporting
    task never reaches back into framework state.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Request path without query string")
    method: str = Field(..., description="HTTP method")
    user_agent: str = Field(default="", description="User-Agent header, empty if absent")
    path_params: dict[str, str] = Field(default_factory=dict, description="Route parameters")
    query_params: dict[str, tuple[str, ...]] = Field(
        default_factory=dict, description="Query parameters, all values per key"
    )
    headers: dict[str, tuple[str, ...]] = Field(
        default_factory=dict, description="Headers keyed by lower-cased name"
    )

    @classmethod
    def from_request(cls, request: Request) -> "RequestSnapshot":
        """Copy path, method, route params, query params and headers out of a request."""
        return cls(
            path=request.url.path,
            method=request.method,
            user_agent=request.headers.get("user-agent", ""),
            path_params={k: str(v) for k, v in request.path_params.items()},
            query_params=_group(request.query_params.multi_items()),
            headers=_group((k.lower(), v) for k, v in request.headers.items()),
        )


class FailureEvent(BaseModel):
    """A caught exception reduced to the fields a diagnostic report carries."""

    model_config = ConfigDict(frozen=True)

    message: str
    exception_type: str
    stack_trace: str | None = None
    source_file: str | None = None
    occurred_at: datetime = Field(default_factory=_utc_now)
    inner: Optional["FailureEvent"] = None

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        occurred_at: datetime | None = None,
        include_inner: bool = True,
    ) -> "FailureEvent":
        """Build a failure event from an exception and, one level deep, its chained cause."""
        inner = None
        if include_inner:
            chained = chained_exception(exc)
            if chained is not None:
                inner = cls.from_exception(chained, occurred_at, include_inner=False)

        return cls(
            message=str(exc),
            exception_type=type(exc).__name__,
            stack_trace=_format_stack(exc),
            source_file=_source_file(exc),
            occurred_at=occurred_at or _utc_now(),
            inner=inner,
        )
