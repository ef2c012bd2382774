"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from error_relay.core.config import get_settings
from error_relay.schemas.internal import RequestSnapshot

ENDPOINT_ENV_VAR = "RUNTIME_ERROR_ENDPOINT_URL"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test with reporting disabled and no cached settings."""
    monkeypatch.delenv(ENDPOINT_ENV_VAR, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def collector_url() -> str:
    """Return test collector URL."""
    return "https://collector.example.com/runtime-errors"


@pytest.fixture
def snapshot() -> RequestSnapshot:
    """Return a snapshot of a failed board request."""
    return RequestSnapshot(
        path="/api/boards/b-42/cards",
        method="POST",
        user_agent="pytest-agent/1.0",
        path_params={"boardId": "b-42"},
        query_params={"page": ("2",)},
        headers={"user-agent": ("pytest-agent/1.0",), "x-board-id": ("header-board",)},
    )


def _raise_and_catch(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:
        return caught


@pytest.fixture
def raise_and_catch() -> Callable[[BaseException], BaseException]:
    """Return a helper that raises an exception so it carries a traceback."""
    return _raise_and_catch


@pytest.fixture
def chained_failure() -> BaseException:
    """Return a RuntimeError explicitly raised from a KeyError."""
    try:
        try:
            raise KeyError("card-7")
        except KeyError as inner:
            raise RuntimeError("could not move card") from inner
    except RuntimeError as exc:
        return exc
