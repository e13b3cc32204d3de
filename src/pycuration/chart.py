"""Live efficiency chart state machine.

The chart keeps every appended :class:`EfficiencyPoint` in
``raw_points`` and treats the rendered dataset as a projection of it.
Mode toggles rebuild the projection from the raw points, never from
already rounded plot values, so toggling back and forth is lossless.

States::

    BUILDING --finalize()--> FINALIZED
        |                        |
        +------destroy()---------+--> DESTROYED

``toggle_mode()`` passes through ``RECOMPUTING`` and returns to the
state it started from.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime

from pycuration._constants import (
    GUIDE_LINE_IDS,
    MEAN_LINE_COLOR,
    MEAN_LINE_ID,
    MEDIAN_LINE_COLOR,
    MEDIAN_LINE_ID,
    ONE_DAY_MS,
    POINT_COLOR,
    SAME_AUTHOR_COLOR,
)
from pycuration._normalize import is_finite, round_half_up
from pycuration.exceptions import ChartStateError
from pycuration.formatting import axis_title, dataset_label, point_color
from pycuration.models._base import parse_timestamp
from pycuration.models.chart import ChartMode, ChartState, ChartViewState, GuideLine, PlotPoint
from pycuration.models.efficiency import EfficiencyPoint
from pycuration.surface import ChartSurface, LineStyle

_logger = logging.getLogger(__name__)

# Keeps the earliest out-of-window point off the axis edge.
_X_EDGE_PAD_MS = 5


def mean(values: Iterable[float]) -> float | None:
    """Arithmetic mean of the finite *values*; ``None`` when there are none."""
    finite = [v for v in values if is_finite(v)]
    if not finite:
        return None
    return sum(finite) / len(finite)


def median(values: Iterable[float]) -> float | None:
    """Median of the finite *values*, averaging the middle pair for even counts."""
    ordered = sorted(v for v in values if is_finite(v))
    if not ordered:
        return None
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def project_y(point: EfficiencyPoint, mode: ChartMode) -> int | None:
    """Plotted y value of *point* in *mode*, or ``None`` if not finite."""
    value = point.weighted_eff if mode is ChartMode.WEIGHTED else point.efficiency
    if not is_finite(value):
        return None
    return round_half_up(value)


def initial_x_range(anchor: datetime | int | float | str, days: int) -> tuple[int, int]:
    """Default x-range: ``days + 1`` days before *anchor* up to midnight of the anchor day.

    Midnight is taken in the anchor's own time zone; naive and numeric
    anchors are UTC.
    """
    anchor_dt = parse_timestamp(anchor)
    anchor_ms = int(anchor_dt.timestamp() * 1000)
    start_ms = anchor_ms - (days + 1) * ONE_DAY_MS
    midnight = anchor_dt.replace(hour=0, minute=0, second=0, microsecond=0)
    return start_ms, int(midnight.timestamp() * 1000)


class EfficiencyChart:
    """Scatter chart of one voter's efficiency history.

    Parameters
    ----------
    surface
        Rendering backend.
    anchor
        Creation time of the target post (datetime, epoch seconds or
        epoch milliseconds).
    days
        Length of the analysed history window.
    label
        Dataset label prefix, usually ``@voter``.
    y_baseline_min
        Lower bound of the y axis.
    pad
        Head room added above the highest plotted value.
    """

    def __init__(
        self,
        surface: ChartSurface,
        *,
        anchor: datetime | int | float | str,
        days: int = 7,
        label: str = "",
        y_baseline_min: int = 0,
        pad: int = 5,
    ) -> None:
        self._surface = surface
        self._label = label
        self._pad = pad
        self._state = ChartState.BUILDING
        x_min, x_max = initial_x_range(anchor, days)
        self._view = ChartViewState(x_min=x_min, x_max=x_max, y_min=y_baseline_min)

        surface.create_scatter(
            {
                "type": "scatter",
                "label": dataset_label(label, self._view.mode),
                "axis_title": axis_title(self._view.mode),
                "x_min": x_min,
                "x_max": x_max,
                "y_min": y_baseline_min,
                "point_color": POINT_COLOR,
                "same_author_color": SAME_AUTHOR_COLOR,
            }
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def mode(self) -> ChartMode:
        return self._view.mode

    @property
    def finalized(self) -> bool:
        return self._view.finalized

    @property
    def view(self) -> ChartViewState:
        """Deep copy of the current view state."""
        return self._view.model_copy(deep=True)

    def plotted_values(self) -> list[int]:
        """Projected y values of all raw points in the current mode."""
        values = (project_y(point, self._view.mode) for point in self._view.raw_points)
        return [y for y in values if y is not None]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _require_alive(self, operation: str) -> None:
        if self._state is ChartState.DESTROYED:
            raise ChartStateError(f"Cannot {operation}: chart was destroyed")

    def _sync_bounds(self) -> None:
        view = self._view
        self._surface.set_axis_bounds(view.x_min, view.x_max, view.y_min, view.y_max)
        self._surface.redraw()

    def append(self, point: EfficiencyPoint) -> bool:
        """Store *point* and plot it in the current mode.

        Returns ``False`` (and changes nothing) when the timestamp or the
        active-mode value is not finite.
        """
        self._require_alive("append")
        y = project_y(point, self._view.mode)
        if not is_finite(point.ts_ms) or y is None:
            _logger.warning(
                "Skipping non numeric point ts_ms=%s efficiency=%s weighted_eff=%s",
                point.ts_ms,
                point.efficiency,
                point.weighted_eff,
            )
            return False

        view = self._view
        view.raw_points.append(point)
        self._surface.push_point(PlotPoint(x=point.ts_ms, y=y, point=point, color=point_color(point)))

        if point.ts_ms < view.x_min:
            view.x_min = point.ts_ms - _X_EDGE_PAD_MS

        candidate_max = math.ceil(y + self._pad)
        if view.y_max is None or candidate_max > view.y_max:
            view.y_max = candidate_max

        self._sync_bounds()
        return True

    def toggle_mode(self) -> ChartMode:
        """Switch between raw and weighted efficiency and rebuild the plot."""
        self._require_alive("toggle mode")
        resume_state = self._state
        self._state = ChartState.RECOMPUTING
        try:
            view = self._view
            view.mode = view.mode.flipped()
            self._surface.set_labels(dataset_label(self._label, view.mode), axis_title(view.mode))

            plotted: list[PlotPoint] = []
            for point in view.raw_points:
                y = project_y(point, view.mode)
                if y is not None:
                    plotted.append(PlotPoint(x=point.ts_ms, y=y, point=point, color=point_color(point)))
            self._surface.replace_points(plotted)

            self._clear_guide_lines()
            ys = [p.y for p in plotted]
            view.y_max = math.ceil(max([*ys, view.y_min]) + self._pad) if ys else None

            if view.finalized:
                self._upsert_guide_lines()
            self._sync_bounds()
        finally:
            self._state = resume_state
        _logger.debug("Chart %s switched to %s mode", self._label, self._view.mode)
        return self._view.mode

    def finalize(self) -> None:
        """Mark the stream complete and draw the mean/median guide lines."""
        self._require_alive("finalize")
        self._view.finalized = True
        self._state = ChartState.FINALIZED
        self.compute_guide_lines()

    def compute_guide_lines(self) -> dict[str, GuideLine]:
        """Recompute mean/median lines over the plotted values.

        Only finalized charts carry guide lines; before that this is a
        no-op returning an empty mapping. The lines raise ``y_max`` only
        when ``ceil(max(mean, median) + pad)`` exceeds it; a ``y_max``
        already covering them gets no extra head room.
        """
        self._require_alive("compute guide lines")
        if not self._view.finalized:
            return {}
        lines = self._upsert_guide_lines()
        self._sync_bounds()
        return lines

    def destroy(self) -> None:
        """Release the render surface. The chart cannot be used afterwards."""
        self._require_alive("destroy")
        self._surface.destroy()
        self._state = ChartState.DESTROYED

    # ------------------------------------------------------------------
    # Guide lines
    # ------------------------------------------------------------------

    def _clear_guide_lines(self) -> None:
        self._surface.remove_lines(GUIDE_LINE_IDS)
        self._view.guide_lines.clear()

    def _upsert_guide_lines(self) -> dict[str, GuideLine]:
        view = self._view
        ys = self.plotted_values()
        stats = (
            (MEAN_LINE_ID, mean(ys), MEAN_LINE_COLOR, "Mean"),
            (MEDIAN_LINE_ID, median(ys), MEDIAN_LINE_COLOR, "Median"),
        )

        mid_x = (view.x_min + view.x_max) // 2
        for line_id, y, color, label in stats:
            if y is None:
                continue
            line = GuideLine(id=line_id, y=y, color=color, label=label)
            view.guide_lines[line_id] = line
            self._surface.upsert_line(
                line_id,
                [(view.x_min, y), (mid_x, y), (view.x_max, y)],
                LineStyle(color=color, label=label),
            )

        levels = [line.y for line in view.guide_lines.values()]
        if levels:
            top = math.ceil(max(levels) + self._pad)
            if view.y_max is None or top > view.y_max:
                view.y_max = top
        return dict(view.guide_lines)
