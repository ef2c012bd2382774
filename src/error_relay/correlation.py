"""Board identifier lookup used to group diagnostics."""

from collections.abc import Mapping

from error_relay.observability.constants import BOARD_ID_HEADER, BOARD_ID_PARAM
from error_relay.schemas.internal import RequestSnapshot


def _joined(values: Mapping[str, tuple[str, ...]], key: str) -> str | None:
    found = values.get(key)
    if found is None:
        return None
    return ",".join(found)


def extract_board_id(snapshot: RequestSnapshot) -> str | None:
    """Find the board id for a failed request.

    Sources are tried in order and the first one that has the key wins:
    route parameter ``boardId``, query parameter ``boardId``, header
    ``X-Board-Id``. Values are returned as-is; repeated query values or
    headers are joined with commas.
    """
    if BOARD_ID_PARAM in snapshot.path_params:
        return snapshot.path_params[BOARD_ID_PARAM]

    from_query = _joined(snapshot.query_params, BOARD_ID_PARAM)
    if from_query is not None:
        return from_query

    return _joined(snapshot.headers, BOARD_ID_HEADER.lower())
