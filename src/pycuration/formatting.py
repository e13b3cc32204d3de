"""Label, tooltip and counter formatting.

Every helper takes the state it needs as arguments so it can be used by
any render surface without holding a reference to the chart.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

from pycuration._constants import MEAN_LINE_ID, MEDIAN_LINE_ID, POINT_COLOR, SAME_AUTHOR_COLOR
from pycuration._normalize import is_finite, round_half_up, safe_float
from pycuration.models.chart import ChartMode
from pycuration.models.efficiency import EfficiencyPoint, RunningTotals

_EFFICIENCY = "Efficiency"
_WEIGHTED_EFF = "Weighted Eff"


def format_compact(value: float | int | None, whole: bool = True) -> str:
    """Short human form of a counter: ``950``, ``12.3k``, ``123k``, ``1.2M``."""
    number = safe_float(value)
    if number is None or not math.isfinite(number):
        number = 0.0

    if number < 1000:
        return str(round_half_up(number)) if whole else f"{number:.2f}"
    if number < 100_000:
        return f"{number / 1000:.1f}k"
    if number < 1_000_000:
        return f"{round_half_up(number / 1000)}k"
    return f"{number / 1_000_000:.1f}M"


def format_currency(value: float | str, symbol: str = "$", symbol_after: bool = False) -> str | None:
    """Attach a currency symbol; ``None`` for non-finite numbers.

    Strings are taken as already formatted amounts (see
    :func:`format_compact`) and are returned with the symbol attached
    as is; only numbers are checked for finiteness.
    """
    if isinstance(value, str):
        amount = value
    else:
        if not is_finite(value):
            return None
        amount = f"{value:.2f}"
    return f"{amount} {symbol}" if symbol_after else f"{symbol}{amount}"


def format_timestamp(ts_ms: int) -> str:
    """Tooltip title for a point, e.g. ``Mar 4, 14:05`` (UTC)."""
    moment = datetime.fromtimestamp(ts_ms / 1000, tz=UTC)
    return f"{moment:%b} {moment.day}, {moment:%H:%M}"


def dataset_label(label: str, mode: ChartMode) -> str:
    suffix = "Weighted Efficiency" if mode is ChartMode.WEIGHTED else "Efficiency"
    return f"{label} {suffix}".strip()


def axis_title(mode: ChartMode) -> str:
    return f"{_WEIGHTED_EFF if mode is ChartMode.WEIGHTED else _EFFICIENCY} (%)"


def point_color(point: EfficiencyPoint) -> str:
    return SAME_AUTHOR_COLOR if point.same_author else POINT_COLOR


def point_tooltip(point: EfficiencyPoint, mode: ChartMode, symbol: str = "$") -> list[str]:
    """Tooltip lines for a plotted point in the given display mode.

    The active metric comes first, followed by the other metric and the
    reward values.
    """
    if mode is ChartMode.WEIGHTED:
        active, active_name = point.weighted_eff, _WEIGHTED_EFF
        other, other_name = point.efficiency, _EFFICIENCY
    else:
        active, active_name = point.efficiency, _EFFICIENCY
        other, other_name = point.weighted_eff, _WEIGHTED_EFF

    lines = [f"{active_name}: {round_half_up(active)}%"]
    if is_finite(other):
        lines.append(f"{other_name}: {round_half_up(other)}%")

    received = format_currency(point.voter_reward_value, symbol)
    if received is not None:
        lines.append(f"Voter Received: {received}")
    total = format_currency(point.total_value, symbol)
    if total is not None:
        lines.append(f"Post Total: {total}")
    return lines


def guide_line_tooltip(line_id: str, y: float) -> str:
    if line_id == MEAN_LINE_ID:
        return f"Mean: {y:.0f}%"
    if line_id == MEDIAN_LINE_ID:
        return f"Median: {y:.0f}%"
    return f"{y:.0f}%"


def totals_summary(totals: RunningTotals, symbol: str = "$") -> dict[str, str]:
    """Counter strings for the presentation shell."""
    return {
        "rewards": format_compact(totals.count),
        "contributed": format_currency(format_compact(totals.contributed_value, whole=False), symbol) or "",
        "received": format_currency(format_compact(totals.total_curation_reward, whole=False), symbol) or "",
        "author": format_compact(totals.same_author_count),
    }
