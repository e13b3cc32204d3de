"""Chart view state models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from pycuration._constants import POINT_COLOR
from pycuration.models._base import CurationBaseModel
from pycuration.models.efficiency import EfficiencyPoint


class ChartMode(StrEnum):
    RAW = "raw"
    WEIGHTED = "weighted"

    def flipped(self) -> ChartMode:
        return ChartMode.RAW if self is ChartMode.WEIGHTED else ChartMode.WEIGHTED


class ChartState(StrEnum):
    BUILDING = "building"
    FINALIZED = "finalized"
    RECOMPUTING = "recomputing"
    DESTROYED = "destroyed"


class GuideLine(CurationBaseModel):
    """Constant-value overlay drawn across the visible x-range."""

    id: str
    y: float
    color: str
    label: str


class PlotPoint(CurationBaseModel):
    """A raw point projected into the active display mode."""

    x: int
    y: int
    point: EfficiencyPoint
    color: str = POINT_COLOR


class ChartViewState(BaseModel):
    """Everything the chart state machine owns besides the render surface."""

    model_config = ConfigDict(extra="forbid")

    raw_points: list[EfficiencyPoint] = Field(default_factory=list)
    mode: ChartMode = ChartMode.RAW
    x_min: int
    x_max: int
    y_min: int = 0
    y_max: int | None = None
    finalized: bool = False
    guide_lines: dict[str, GuideLine] = Field(default_factory=dict)
