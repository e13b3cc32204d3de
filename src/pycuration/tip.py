"""Per-voter efficiency tip: one aggregator run feeding one chart."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pycuration._api.rewards import RewardSource
from pycuration.aggregator import EfficiencyAggregator, TotalsCallback
from pycuration.cache import PostCache
from pycuration.chart import EfficiencyChart
from pycuration.config import CurationConfig
from pycuration.exceptions import SourceFetchError
from pycuration.formatting import totals_summary
from pycuration.models.chart import ChartState
from pycuration.models.efficiency import EfficiencyPoint, RunningTotals
from pycuration.models.post import TargetPost
from pycuration.models.vote import Vote, find_vote
from pycuration.surface import ChartSurface

_logger = logging.getLogger(__name__)


class VoterTip:
    """Efficiency analysis of a single voter on the target post.

    The tip owns its chart and its running totals exclusively. Only the
    :class:`PostCache` is shared with other tips.
    """

    def __init__(
        self,
        vote: Vote,
        post: TargetPost,
        *,
        cache: PostCache,
        source: RewardSource,
        surface: ChartSurface,
        config: CurationConfig,
        on_totals_changed: TotalsCallback | None = None,
        days: int | None = None,
    ) -> None:
        self.vote = vote
        self.post = post
        self.days = config.days if days is None else days
        self._config = config
        self._on_totals_changed = on_totals_changed
        self.chart = EfficiencyChart(
            surface,
            anchor=post.created_at,
            days=self.days,
            label=f"@{vote.voter}",
            y_baseline_min=config.y_baseline_min,
            pad=config.y_pad,
        )
        self._aggregator = EfficiencyAggregator(config, source, cache)

    @property
    def voter(self) -> str:
        return self.vote.voter

    @property
    def totals(self) -> RunningTotals:
        return self._aggregator.totals.model_copy()

    def summary(self) -> dict[str, str]:
        """Counter strings for the presentation shell."""
        return totals_summary(self._aggregator.totals, self._config.currency_symbol)

    def _on_point(self, point: EfficiencyPoint) -> None:
        if self.chart.state is ChartState.DESTROYED:
            return
        self.chart.append(point)

    def _on_complete(self) -> None:
        if self.chart.state is ChartState.DESTROYED:
            return
        self.chart.finalize()

    async def prefetch(self) -> RunningTotals:
        """Run the efficiency pipeline for this voter.

        Raises
        ------
        SourceFetchError
            If the voter's reward history could not be fetched.
        """
        if self.chart.state is ChartState.DESTROYED:
            _logger.debug("Tip for %s already destroyed, not prefetching", self.voter)
            return self.totals
        await self._aggregator.run(
            self.vote,
            self.post,
            self.days,
            on_point=self._on_point,
            on_totals_changed=self._on_totals_changed,
            on_complete=self._on_complete,
        )
        return self.totals

    def toggle_mode(self) -> None:
        self.chart.toggle_mode()

    def destroy(self) -> None:
        self.chart.destroy()


def build_tips(
    post: TargetPost,
    votes: list[Vote],
    voters: Iterable[str],
    *,
    cache: PostCache,
    source: RewardSource,
    surface_factory: Callable[[str], ChartSurface],
    config: CurationConfig,
    on_totals_changed: Callable[[str, RunningTotals], None] | None = None,
    days: int | None = None,
) -> list[VoterTip]:
    """Create a tip for every listed voter that has a vote on *post*.

    Voters without a matching vote are skipped. All tips share *cache*.
    """
    tips: list[VoterTip] = []
    for voter in voters:
        vote = find_vote(votes, voter)
        if vote is None:
            _logger.debug("No vote from %s on %s/%s, skipping", voter, post.author, post.permlink)
            continue

        callback: TotalsCallback | None = None
        if on_totals_changed is not None:
            callback = _bind_voter(on_totals_changed, vote.voter)

        tips.append(
            VoterTip(
                vote,
                post,
                cache=cache,
                source=source,
                surface=surface_factory(vote.voter),
                config=config,
                on_totals_changed=callback,
                days=days,
            )
        )
    return tips


def _bind_voter(fn: Callable[[str, RunningTotals], None], voter: str) -> TotalsCallback:
    def _callback(totals: RunningTotals) -> None:
        fn(voter, totals)

    return _callback


async def prefetch_sequentially(tips: Iterable[VoterTip]) -> dict[str, RunningTotals]:
    """Run each tip's pipeline one after another.

    A tip whose reward history cannot be fetched is logged and left
    without points; the remaining tips still run.
    """
    results: dict[str, RunningTotals] = {}
    for tip in tips:
        try:
            results[tip.voter] = await tip.prefetch()
        except SourceFetchError as exc:
            _logger.warning("Reward history for %s unavailable: %s", tip.voter, exc)
    return results
