"""Data models for curation efficiency analysis."""

from pycuration.models._base import CurationBaseModel, Timestamp, parse_timestamp, to_epoch_ms
from pycuration.models.chart import ChartMode, ChartState, ChartViewState, GuideLine, PlotPoint
from pycuration.models.efficiency import EfficiencyPoint, RunningTotals
from pycuration.models.post import PostSnapshot, TargetPost
from pycuration.models.reward import RewardEvent, RewardTable
from pycuration.models.vote import Vote, find_vote

__all__ = [
    "ChartMode",
    "ChartState",
    "ChartViewState",
    "CurationBaseModel",
    "EfficiencyPoint",
    "GuideLine",
    "PlotPoint",
    "PostSnapshot",
    "RewardEvent",
    "RewardTable",
    "RunningTotals",
    "TargetPost",
    "Timestamp",
    "Vote",
    "find_vote",
    "parse_timestamp",
    "to_epoch_ms",
]
