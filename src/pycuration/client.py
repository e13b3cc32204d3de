"""High-level async client for curation efficiency analysis."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

import aiohttp

from pycuration._api.rewards import HttpRewardSource, RewardSource, reward_window
from pycuration._transport import HttpTransport
from pycuration.cache import PostCache, PostResolver
from pycuration.config import CurationConfig
from pycuration.exceptions import CurationError
from pycuration.models.efficiency import RunningTotals
from pycuration.models.post import TargetPost
from pycuration.models.reward import RewardTable
from pycuration.models.vote import Vote
from pycuration.surface import ChartSurface
from pycuration.tip import VoterTip, build_tips, prefetch_sequentially

_logger = logging.getLogger(__name__)


class CurationClient:
    """Async client tying the reward source, the post cache and voter tips together.

    One client holds one :class:`PostCache` for its whole lifetime, so
    every tip created through it shares resolved post snapshots.

    Usage::

        async with CurationClient(config, resolver) as client:
            tip = client.create_tip(vote, post, RecordingSurface())
            await tip.prefetch()
    """

    def __init__(
        self,
        config: CurationConfig,
        resolver: PostResolver,
        *,
        session: aiohttp.ClientSession | None = None,
        source: RewardSource | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._source = source
        self._external_source = source is not None
        self.post_cache = PostCache(resolver)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CurationClient:
        if not self._external_source:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._source = HttpRewardSource(HttpTransport(self._config, self._http_session))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_source:
            self._source = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_source(self) -> RewardSource:
        if self._source is None:
            raise CurationError("Client not initialized. Use 'async with CurationClient(...) as client:'")
        return self._source

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_curation_rewards(self, voter: str, post: TargetPost, days: int | None = None) -> RewardTable:
        """Fetch the reward window analysed for *voter* on *post*."""
        days = self._config.days if days is None else days
        start_sec, end_sec = reward_window(post.created_at, days)
        return await self._require_source().fetch_rewards(voter, start_sec, end_sec)

    def create_tip(
        self,
        vote: Vote,
        post: TargetPost,
        surface: ChartSurface,
        *,
        on_totals_changed: Callable[[RunningTotals], None] | None = None,
        days: int | None = None,
    ) -> VoterTip:
        return VoterTip(
            vote,
            post,
            cache=self.post_cache,
            source=self._require_source(),
            surface=surface,
            config=self._config,
            on_totals_changed=on_totals_changed,
            days=days,
        )

    async def analyze_voters(
        self,
        post: TargetPost,
        votes: list[Vote],
        voters: Iterable[str],
        surface_factory: Callable[[str], ChartSurface],
        *,
        on_totals_changed: Callable[[str, RunningTotals], None] | None = None,
        days: int | None = None,
    ) -> list[VoterTip]:
        """Build a tip per voter and run them one after another."""
        tips = build_tips(
            post,
            votes,
            voters,
            cache=self.post_cache,
            source=self._require_source(),
            surface_factory=surface_factory,
            config=self._config,
            on_totals_changed=on_totals_changed,
            days=days,
        )
        _logger.debug("Analysing %d voters on %s/%s", len(tips), post.author, post.permlink)
        await prefetch_sequentially(tips)
        return tips
