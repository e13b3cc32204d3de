"""Tests for voter tips and the high-level client."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from pycuration import CurationClient, CurationConfig, CurationError, RecordingSurface
from pycuration.cache import PostCache
from pycuration.exceptions import SourceFetchError
from pycuration.models import ChartState, PostSnapshot, RewardTable, RunningTotals, TargetPost, Vote
from pycuration.tip import VoterTip, build_tips, prefetch_sequentially

_COLS = {"time": 0, "author": 1, "permlink": 2, "vests": 3}
_POST = TargetPost(author="zed", permlink="target", created_at=datetime(2024, 1, 10, tzinfo=UTC))
_CONFIG = CurationConfig(throttle_delay=0, retry_delay=0)
_VOTES = [
    Vote(voter="alice", percent=10000, rshares=100_000_000),
    Vote(voter="bob", percent=5000, rshares=100_000_000),
]


class _FakeSource:
    """Serves a reward table per voter; unknown voters fail."""

    def __init__(self, tables: dict[str, RewardTable]) -> None:
        self.tables = tables
        self.calls: list[str] = []

    async def fetch_rewards(self, voter: str, start_sec: int, end_sec: int) -> RewardTable:
        self.calls.append(voter)
        if voter not in self.tables:
            raise SourceFetchError(f"no history for {voter}", status_code=404)
        return self.tables[voter]


class _FakeResolver:
    def __init__(self) -> None:
        self.calls = 0

    async def resolve(self, author: str, permlink: str, as_of: object) -> PostSnapshot | None:
        self.calls += 1
        return PostSnapshot(
            author=author,
            permlink=permlink,
            total_vests=100,
            total_rshares=1000,
            total_payout_value=50,
        )


def _history() -> RewardTable:
    return RewardTable(
        cols=_COLS,
        rows=[
            [1_704_500_000, "carol", "p1", 5],
            [1_704_400_000, "zed", "p2", 10],
        ],
    )


def _tip(source: _FakeSource, resolver: _FakeResolver | None = None) -> tuple[VoterTip, RecordingSurface]:
    surface = RecordingSurface()
    tip = VoterTip(
        _VOTES[0],
        _POST,
        cache=PostCache(resolver or _FakeResolver()),
        source=source,
        surface=surface,
        config=_CONFIG,
    )
    return tip, surface


# ------------------------------------------------------------------
# VoterTip
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_prefetch_fills_and_finalizes_chart() -> None:
    tip, surface = _tip(_FakeSource({"alice": _history()}))

    totals = await tip.prefetch()

    assert tip.voter == "alice"
    assert totals.count == 2
    assert totals.same_author_count == 1
    assert tip.chart.state is ChartState.FINALIZED
    assert [p.y for p in surface.points] == [50, 100]
    assert set(surface.lines) == {"mean-line", "median-line"}
    assert surface.config["label"] == "@alice Efficiency"
    assert tip.summary() == {"rewards": "2", "contributed": "$10.00", "received": "$7.50", "author": "1"}


@pytest.mark.asyncio
async def test_toggle_mode_switches_chart() -> None:
    tip, surface = _tip(_FakeSource({"alice": _history()}))
    await tip.prefetch()

    tip.toggle_mode()

    assert surface.labels[0] == "@alice Weighted Efficiency"


@pytest.mark.asyncio
async def test_destroyed_tip_does_not_prefetch() -> None:
    source = _FakeSource({"alice": _history()})
    tip, surface = _tip(source)

    tip.destroy()
    totals = await tip.prefetch()

    assert surface.destroyed
    assert source.calls == []
    assert totals.count == 0


@pytest.mark.asyncio
async def test_prefetch_propagates_source_failure() -> None:
    tip, surface = _tip(_FakeSource({}))
    with pytest.raises(SourceFetchError):
        await tip.prefetch()
    assert surface.points == []
    assert tip.chart.state is ChartState.BUILDING


# ------------------------------------------------------------------
# build_tips / prefetch_sequentially
# ------------------------------------------------------------------


def test_build_tips_skips_voters_without_vote() -> None:
    surfaces: dict[str, RecordingSurface] = {}

    def factory(voter: str) -> RecordingSurface:
        surfaces[voter] = RecordingSurface()
        return surfaces[voter]

    tips = build_tips(
        _POST,
        _VOTES,
        ["alice", "nobody", "bob"],
        cache=PostCache(_FakeResolver()),
        source=_FakeSource({}),
        surface_factory=factory,
        config=_CONFIG,
    )

    assert [tip.voter for tip in tips] == ["alice", "bob"]
    assert set(surfaces) == {"alice", "bob"}


@pytest.mark.asyncio
async def test_prefetch_sequentially_continues_after_failure(caplog: pytest.LogCaptureFixture) -> None:
    resolver = _FakeResolver()
    source = _FakeSource({"bob": _history()})
    seen: list[tuple[str, RunningTotals]] = []
    tips = build_tips(
        _POST,
        _VOTES,
        ["alice", "bob"],
        cache=PostCache(resolver),
        source=source,
        surface_factory=lambda voter: RecordingSurface(),
        config=_CONFIG,
        on_totals_changed=lambda voter, totals: seen.append((voter, totals)),
    )

    with caplog.at_level(logging.WARNING, logger="pycuration.tip"):
        results = await prefetch_sequentially(tips)

    assert source.calls == ["alice", "bob"]
    assert list(results) == ["bob"]
    assert results["bob"].count == 2
    assert [voter for voter, _ in seen] == ["bob", "bob"]
    assert "alice" in caplog.text


# ------------------------------------------------------------------
# CurationClient
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_client_shares_cache_between_voters() -> None:
    resolver = _FakeResolver()
    source = _FakeSource({"alice": _history(), "bob": _history()})

    async with CurationClient(_CONFIG, resolver, source=source) as client:
        tips = await client.analyze_voters(_POST, _VOTES, ["alice", "bob"], lambda voter: RecordingSurface())

    assert [tip.totals.count for tip in tips] == [2, 2]
    # Two distinct historical posts, resolved once each for both voters.
    assert resolver.calls == 2
    assert len(client.post_cache) == 2


@pytest.mark.asyncio
async def test_client_get_curation_rewards() -> None:
    source = _FakeSource({"alice": _history()})
    async with CurationClient(_CONFIG, _FakeResolver(), source=source) as client:
        table = await client.get_curation_rewards("alice", _POST)
    assert len(table) == 2


@pytest.mark.asyncio
async def test_client_create_tip() -> None:
    source = _FakeSource({"alice": _history()})
    async with CurationClient(_CONFIG, _FakeResolver(), source=source) as client:
        tip = client.create_tip(_VOTES[0], _POST, RecordingSurface())
        await tip.prefetch()
    assert tip.totals.count == 2


def test_client_requires_context_manager() -> None:
    client = CurationClient(_CONFIG, _FakeResolver())
    with pytest.raises(CurationError, match="not initialized"):
        client.create_tip(_VOTES[0], _POST, RecordingSurface())
