"""Curation reward history endpoint.

Endpoint:
  - /rewards_api/getRewards/curation_reward/{voter}/{start}-{end}
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

from pycuration._constants import CURATION_REWARDS_PATH, ONE_DAY_MS
from pycuration._transport import Transport
from pycuration.exceptions import CurationTransportError, SourceFetchError
from pycuration.models._base import to_epoch_ms
from pycuration.models.reward import RewardTable

_logger = logging.getLogger(__name__)


class RewardSource(Protocol):
    """Anything that can return a voter's reward history for a window."""

    async def fetch_rewards(self, voter: str, start_sec: int, end_sec: int) -> RewardTable:
        ...


def reward_window(created: datetime | int | float | str, days: int) -> tuple[int, int]:
    """Epoch-second bounds of the history window analysed for a post.

    The window ends one day before the post was created and spans *days*
    days before that, so the post's own voting period is excluded.
    """
    created_ms = to_epoch_ms(created)
    day_before_ms = created_ms - ONE_DAY_MS
    window_start_ms = day_before_ms - days * ONE_DAY_MS
    return window_start_ms // 1000, day_before_ms // 1000


def build_rewards_path(voter: str, start_sec: int, end_sec: int) -> str:
    return f"{CURATION_REWARDS_PATH}/{voter}/{start_sec}-{end_sec}"


def _parse_rewards_response(path: str, body: Any) -> RewardTable:
    if not isinstance(body, dict):
        raise SourceFetchError(f"Unexpected payload from {path}: {type(body).__name__}", endpoint=path)
    result = body.get("result")
    if result is None:
        # An empty window is reported without a result object.
        return RewardTable()
    if not isinstance(result, dict):
        raise SourceFetchError(f"Missing 'result' object from {path}", endpoint=path)
    return RewardTable.model_validate(result)


async def fetch_curation_rewards(
    transport: Transport,
    voter: str,
    start_sec: int,
    end_sec: int,
) -> RewardTable:
    """Fetch a voter's curation rewards between two epoch-second bounds.

    Raises
    ------
    SourceFetchError
        If the request fails or the payload is not a reward table.
    """
    path = build_rewards_path(voter, start_sec, end_sec)
    try:
        body = await transport.get_json(path)
    except SourceFetchError:
        raise
    except CurationTransportError as exc:
        raise SourceFetchError(
            f"Curation rewards for {voter} unavailable: {exc}",
            status_code=exc.status_code,
            endpoint=exc.endpoint or path,
        ) from exc

    table = _parse_rewards_response(path, body)
    _logger.debug("Fetched %d curation rewards for voter=%s window=%d-%d", len(table), voter, start_sec, end_sec)
    return table


class HttpRewardSource:
    """:class:`RewardSource` backed by the reward history HTTP API."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def fetch_rewards(self, voter: str, start_sec: int, end_sec: int) -> RewardTable:
        return await fetch_curation_rewards(self._transport, voter, start_sec, end_sec)
