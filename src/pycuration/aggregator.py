"""Curation efficiency aggregation.

Turns a voter's reward history into a stream of
:class:`~pycuration.models.EfficiencyPoint`s, one reward event at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pycuration._api.rewards import RewardSource, reward_window
from pycuration._normalize import is_finite, round2, round_half_up
from pycuration._retry import retry_async
from pycuration.cache import PostCache
from pycuration.config import CurationConfig
from pycuration.exceptions import ResolutionError
from pycuration.models.efficiency import EfficiencyPoint, RunningTotals
from pycuration.models.post import PostSnapshot, TargetPost
from pycuration.models.reward import RewardEvent
from pycuration.models.vote import Vote

_logger = logging.getLogger(__name__)

PointCallback = Callable[[EfficiencyPoint], None]
TotalsCallback = Callable[[RunningTotals], None]
CompleteCallback = Callable[[], None]


@dataclass(frozen=True, slots=True)
class EfficiencyOutcome:
    """A computed point plus the value the voter contributed to the post."""

    point: EfficiencyPoint
    contributed_value: float


def compute_point(
    event: RewardEvent,
    snapshot: PostSnapshot,
    vote: Vote,
    *,
    same_author: bool = False,
) -> EfficiencyOutcome | None:
    """Efficiency of *vote* on the historical post behind *event*.

    Returns ``None`` when the inputs cannot produce a meaningful value:
    non-positive vests or rshares on either side, or a non-finite result.
    """
    total_vests = snapshot.total_vests
    total_rshares = snapshot.total_rshares
    voter_rshares = vote.scaled_rshares
    voter_vests = event.vests

    if total_vests <= 0 or total_rshares <= 0 or voter_rshares <= 0 or voter_vests <= 0:
        return None

    pct_contributed = voter_rshares / total_rshares
    if pct_contributed <= 0:
        return None
    pct_received = voter_vests / total_vests

    raw_efficiency = 100 * pct_received / pct_contributed
    if not is_finite(raw_efficiency):
        return None
    efficiency = round_half_up(raw_efficiency)
    weighted_eff = round_half_up(efficiency * vote.weight_fraction)

    total_value = round2(snapshot.total_payout_value)
    voter_reward_value = round2(pct_received * total_value)
    voter_contributed_value = round2(pct_contributed * total_value)
    if not all(is_finite(v) for v in (weighted_eff, total_value, voter_reward_value, voter_contributed_value)):
        return None

    point = EfficiencyPoint(
        ts_ms=event.time_sec * 1000,
        efficiency=efficiency,
        weighted_eff=weighted_eff,
        voter_reward_value=voter_reward_value,
        total_value=total_value,
        same_author=same_author,
    )
    return EfficiencyOutcome(point=point, contributed_value=voter_contributed_value)


class EfficiencyAggregator:
    """Compute a voter's historical curation efficiency, one event at a time.

    Events are processed strictly sequentially and throttled, so a single
    run never has more than one resolver request in flight. The
    :class:`PostCache` may be shared with other runs; the totals are not.
    """

    def __init__(
        self,
        config: CurationConfig,
        source: RewardSource,
        cache: PostCache,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._source = source
        self._cache = cache
        self._sleep = sleep
        self.totals = RunningTotals()

    async def _resolve(self, event: RewardEvent) -> PostSnapshot | None:
        description = f"Resolving {event.author}/{event.permlink}"
        try:
            return await retry_async(
                lambda: self._cache.resolve(event.author, event.permlink, event.time_sec),
                attempts=self._config.retry_attempts,
                delay=self._config.retry_delay,
                description=description,
                sleep=self._sleep,
            )
        except ResolutionError as exc:
            _logger.warning("%s, skipping reward at %d: %s", description, event.time_sec, exc.__cause__)
            return None

    async def run(
        self,
        vote: Vote,
        post: TargetPost,
        days: int | None = None,
        on_point: PointCallback | None = None,
        on_totals_changed: TotalsCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> RunningTotals:
        """Fetch the voter's reward window and emit one point per usable event.

        Parameters
        ----------
        vote
            The voter's vote on *post*; supplies rshares and weight.
        post
            The post on display. Its creation time anchors the window and
            its author decides which historical posts count as same-author.
        days
            Window length; defaults to ``config.days``.
        on_point
            Receives each point as soon as it is computed.
        on_totals_changed
            Receives a copy of the running totals after each point.
        on_complete
            Called once after the last event; not called when the window
            fetch fails.

        Returns
        -------
        RunningTotals
            Final totals of this run.

        Raises
        ------
        SourceFetchError
            If the reward window could not be fetched.
        """
        days = self._config.days if days is None else days
        start_sec, end_sec = reward_window(post.created_at, days)
        table = await self._source.fetch_rewards(vote.voter, start_sec, end_sec)

        for event in table.events():
            if not event.time_sec:
                continue

            snapshot = await self._resolve(event)
            if snapshot is None:
                continue

            same_author = snapshot.author == post.author
            if same_author:
                self.totals.same_author_count += 1

            outcome = compute_point(event, snapshot, vote, same_author=same_author)
            if outcome is None:
                _logger.debug("Skipping reward %s/%s for %s: unusable totals", event.author, event.permlink, vote.voter)
                continue

            self.totals.record(outcome.point, outcome.contributed_value)
            if on_point is not None:
                on_point(outcome.point)
            if on_totals_changed is not None:
                on_totals_changed(self.totals.model_copy())

            if self._config.throttle_delay > 0:
                await self._sleep(self._config.throttle_delay)

        _logger.debug(
            "Efficiency run for %s complete: %d points, %d same-author",
            vote.voter,
            self.totals.count,
            self.totals.same_author_count,
        )
        if on_complete is not None:
            on_complete()
        return self.totals
