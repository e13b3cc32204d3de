"""Tests for the pydantic record models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pycuration.models import (
    EfficiencyPoint,
    PostSnapshot,
    RewardTable,
    RunningTotals,
    TargetPost,
    Vote,
    find_vote,
    parse_timestamp,
)

# ------------------------------------------------------------------
# Vote
# ------------------------------------------------------------------


class TestVote:
    def test_coerces_api_values(self) -> None:
        vote = Vote.model_validate(
            {"voter": " alice ", "percent": "5000", "rshares": "250000000", "weight": 123, "time": "2024-01-01"}
        )
        assert vote.voter == "alice"
        assert vote.percent == 5000
        assert vote.rshares == 250_000_000.0
        assert vote.scaled_rshares == 250.0
        assert vote.weight_fraction == 0.5

    def test_blank_voter_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Vote(voter="   ")

    def test_unparseable_numbers_default_to_zero(self) -> None:
        vote = Vote.model_validate({"voter": "bob", "percent": "--", "rshares": None})
        assert vote.percent == 0
        assert vote.rshares == 0.0

    def test_find_vote(self) -> None:
        votes = [Vote(voter="alice", percent=100), Vote(voter="bob", percent=200)]
        assert find_vote(votes, "bob") is votes[1]
        assert find_vote(votes, " bob ") is votes[1]
        assert find_vote(votes, "carol") is None


# ------------------------------------------------------------------
# RewardTable
# ------------------------------------------------------------------


class TestRewardTable:
    SAMPLE: dict = {
        "cols": {"time": 0, "author": 1, "permlink": 2, "vests": 3},
        "rows": [
            [1700000500, "carol", "post-a", "12.5"],
            [None, "dave", "post-b", 1.0],
            [1700000100, "erin"],
        ],
    }

    def test_events_follow_row_order(self) -> None:
        events = list(RewardTable.model_validate(self.SAMPLE).events())

        assert [e.author for e in events] == ["carol", "dave", "erin"]
        assert events[0].time_sec == 1700000500
        assert events[0].permlink == "post-a"
        assert events[0].vests == 12.5

    def test_missing_time_becomes_zero(self) -> None:
        events = list(RewardTable.model_validate(self.SAMPLE).events())
        assert events[1].time_sec == 0

    def test_short_row_fills_defaults(self) -> None:
        events = list(RewardTable.model_validate(self.SAMPLE).events())
        assert events[2].permlink == ""
        assert events[2].vests == 0.0

    def test_column_order_is_taken_from_cols(self) -> None:
        table = RewardTable.model_validate(
            {"cols": {"vests": 0, "time": 1, "permlink": 2, "author": 3}, "rows": [[3.5, 1700000000, "p", "a"]]}
        )
        (event,) = table.events()
        assert event.vests == 3.5
        assert event.time_sec == 1700000000
        assert event.author == "a"

    def test_garbage_payload_gives_empty_table(self) -> None:
        table = RewardTable.model_validate({"rows": "nope", "cols": None})
        assert len(table) == 0
        assert list(table.events()) == []


# ------------------------------------------------------------------
# PostSnapshot / TargetPost
# ------------------------------------------------------------------


class TestPostSnapshot:
    def test_accepts_camel_case_totals(self) -> None:
        snapshot = PostSnapshot.model_validate(
            {
                "author": "bob",
                "permlink": "p1",
                "created": "2024-01-02T03:04:05",
                "totalVests": "100",
                "totalRshares": 1000,
                "total_payout_value": "50.000 SBD",
            }
        )
        assert snapshot.total_vests == 100.0
        assert snapshot.total_rshares == 1000.0
        assert snapshot.total_payout_value == 50.0
        assert snapshot.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert snapshot.key == "bob/p1"

    def test_missing_totals_default_to_zero(self) -> None:
        snapshot = PostSnapshot(author="bob", permlink="p1")
        assert snapshot.total_vests == 0.0
        assert snapshot.total_rshares == 0.0
        assert snapshot.total_payout_value == 0.0
        assert snapshot.created_at is None

    def test_target_post_accepts_created_alias(self) -> None:
        post = TargetPost.model_validate({"author": "zed", "permlink": "t", "created": 1704844800})
        assert post.created_at == datetime(2024, 1, 10, tzinfo=UTC)


class TestParseTimestamp:
    def test_seconds_and_milliseconds_agree(self) -> None:
        expected = datetime.fromtimestamp(1_700_000_000, tz=UTC)
        assert parse_timestamp(1_700_000_000) == expected
        assert parse_timestamp(1_700_000_000_000) == expected

    def test_naive_iso_is_utc(self) -> None:
        assert parse_timestamp("2024-01-02T03:04:05") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert parse_timestamp("2024-01-02T03:04:05Z") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_rejects_unsupported(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp(None)


# ------------------------------------------------------------------
# EfficiencyPoint / RunningTotals
# ------------------------------------------------------------------


def test_efficiency_point_is_frozen() -> None:
    point = EfficiencyPoint(ts_ms=1000, efficiency=50, weighted_eff=25)
    with pytest.raises(ValidationError):
        point.efficiency = 10  # type: ignore[misc]


def test_running_totals_record() -> None:
    totals = RunningTotals()
    totals.record(EfficiencyPoint(ts_ms=1, efficiency=80, weighted_eff=40, voter_reward_value=1.25), 2.0)
    totals.record(EfficiencyPoint(ts_ms=2, efficiency=60, weighted_eff=60, voter_reward_value=0.75), 3.0)

    assert totals.count == 2
    assert totals.weighted_eff_avg == 50.0
    assert totals.contributed_value == 5.0
    assert totals.total_curation_reward == 2.0
    assert totals.same_author_count == 0
