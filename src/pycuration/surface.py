"""Render surface interface for the efficiency chart.

The chart state machine never talks to a plotting library directly; it
drives a :class:`ChartSurface`. :class:`RecordingSurface` keeps the
rendered state in memory, which is enough for headless runs and tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from pycuration.models.chart import PlotPoint


@dataclass(frozen=True, slots=True)
class LineStyle:
    color: str
    label: str
    width: float = 1.5


class ChartSurface(Protocol):
    """Operations the chart state machine needs from a rendering backend."""

    def create_scatter(self, config: dict[str, Any]) -> None:
        ...

    def push_point(self, point: PlotPoint) -> None:
        ...

    def replace_points(self, points: Sequence[PlotPoint]) -> None:
        ...

    def upsert_line(self, line_id: str, points: Sequence[tuple[int, float]], style: LineStyle) -> None:
        ...

    def remove_lines(self, line_ids: Iterable[str]) -> None:
        ...

    def set_axis_bounds(self, x_min: int, x_max: int, y_min: int, y_max: int | None) -> None:
        ...

    def set_labels(self, dataset_label: str, axis_title: str) -> None:
        ...

    def redraw(self) -> None:
        ...

    def destroy(self) -> None:
        ...


@dataclass
class RecordingSurface:
    """In-memory :class:`ChartSurface` that records what would be drawn."""

    config: dict[str, Any] = field(default_factory=dict)
    points: list[PlotPoint] = field(default_factory=list)
    lines: dict[str, tuple[list[tuple[int, float]], LineStyle]] = field(default_factory=dict)
    bounds: tuple[int, int, int, int | None] | None = None
    labels: tuple[str, str] = ("", "")
    redraws: int = 0
    destroyed: bool = False

    def create_scatter(self, config: dict[str, Any]) -> None:
        self.config = dict(config)

    def push_point(self, point: PlotPoint) -> None:
        self.points.append(point)

    def replace_points(self, points: Sequence[PlotPoint]) -> None:
        self.points = list(points)

    def upsert_line(self, line_id: str, points: Sequence[tuple[int, float]], style: LineStyle) -> None:
        self.lines[line_id] = (list(points), style)

    def remove_lines(self, line_ids: Iterable[str]) -> None:
        for line_id in line_ids:
            self.lines.pop(line_id, None)

    def set_axis_bounds(self, x_min: int, x_max: int, y_min: int, y_max: int | None) -> None:
        self.bounds = (x_min, x_max, y_min, y_max)

    def set_labels(self, dataset_label: str, axis_title: str) -> None:
        self.labels = (dataset_label, axis_title)

    def redraw(self) -> None:
        self.redraws += 1

    def destroy(self) -> None:
        self.destroyed = True
        self.points.clear()
        self.lines.clear()
