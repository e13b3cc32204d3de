from __future__ import annotations

import math
from datetime import UTC, datetime

import pytest

from pycuration._constants import MEAN_LINE_ID, MEDIAN_LINE_ID, POINT_COLOR, SAME_AUTHOR_COLOR
from pycuration.formatting import (
    axis_title,
    dataset_label,
    format_compact,
    format_currency,
    format_timestamp,
    guide_line_tooltip,
    point_color,
    point_tooltip,
    totals_summary,
)
from pycuration.models import ChartMode, EfficiencyPoint, RunningTotals


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (950, "950"),
        (999.4, "999"),
        (12_345, "12.3k"),
        (123_456, "123k"),
        (1_234_567, "1.2M"),
        (None, "0"),
        (math.nan, "0"),
    ],
)
def test_format_compact(value: float | None, expected: str) -> None:
    assert format_compact(value) == expected


def test_format_compact_fractional() -> None:
    assert format_compact(2.5, whole=False) == "2.50"


def test_format_currency() -> None:
    assert format_currency(2.5) == "$2.50"
    assert format_currency(2.5, "€", symbol_after=True) == "2.50 €"
    assert format_currency("1.2k") == "$1.2k"
    assert format_currency(math.inf) is None


def test_format_currency_passes_strings_through() -> None:
    assert format_currency("inf") == "$inf"
    assert format_currency("12.3k", "€", symbol_after=True) == "12.3k €"


def test_format_timestamp() -> None:
    ts_ms = int(datetime(2024, 3, 4, 14, 5, tzinfo=UTC).timestamp() * 1000)
    assert format_timestamp(ts_ms) == "Mar 4, 14:05"


def test_labels_follow_mode() -> None:
    assert dataset_label("@alice", ChartMode.RAW) == "@alice Efficiency"
    assert dataset_label("@alice", ChartMode.WEIGHTED) == "@alice Weighted Efficiency"
    assert dataset_label("", ChartMode.RAW) == "Efficiency"
    assert axis_title(ChartMode.RAW) == "Efficiency (%)"
    assert axis_title(ChartMode.WEIGHTED) == "Weighted Eff (%)"


def test_point_color() -> None:
    assert point_color(EfficiencyPoint(ts_ms=1, efficiency=1, weighted_eff=1)) == POINT_COLOR
    assert point_color(EfficiencyPoint(ts_ms=1, efficiency=1, weighted_eff=1, same_author=True)) == SAME_AUTHOR_COLOR


class TestPointTooltip:
    POINT = EfficiencyPoint(ts_ms=1, efficiency=50, weighted_eff=25, voter_reward_value=2.5, total_value=50)

    def test_raw_mode_leads_with_efficiency(self) -> None:
        assert point_tooltip(self.POINT, ChartMode.RAW) == [
            "Efficiency: 50%",
            "Weighted Eff: 25%",
            "Voter Received: $2.50",
            "Post Total: $50.00",
        ]

    def test_weighted_mode_leads_with_weighted(self) -> None:
        lines = point_tooltip(self.POINT, ChartMode.WEIGHTED, "€")
        assert lines[:2] == ["Weighted Eff: 25%", "Efficiency: 50%"]
        assert lines[2] == "Voter Received: €2.50"

    def test_non_finite_alternate_is_omitted(self) -> None:
        point = EfficiencyPoint(ts_ms=1, efficiency=50, weighted_eff=math.nan)
        lines = point_tooltip(point, ChartMode.RAW)
        assert lines[0] == "Efficiency: 50%"
        assert not any(line.startswith("Weighted") for line in lines)


def test_guide_line_tooltip() -> None:
    assert guide_line_tooltip(MEAN_LINE_ID, 42.4) == "Mean: 42%"
    assert guide_line_tooltip(MEDIAN_LINE_ID, 40) == "Median: 40%"


def test_totals_summary() -> None:
    totals = RunningTotals(count=3, contributed_value=5.0, total_curation_reward=2.5, same_author_count=1)
    assert totals_summary(totals) == {
        "rewards": "3",
        "contributed": "$5.00",
        "received": "$2.50",
        "author": "1",
    }
