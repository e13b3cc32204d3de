"""pycuration - Async curation efficiency analytics for vote rewards."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycuration")
except PackageNotFoundError:
    __version__ = "0+local"

from pycuration._api.rewards import HttpRewardSource, RewardSource, reward_window
from pycuration.aggregator import EfficiencyAggregator, compute_point
from pycuration.cache import PostCache, PostResolver
from pycuration.chart import EfficiencyChart, mean, median
from pycuration.client import CurationClient
from pycuration.config import CurationConfig
from pycuration.exceptions import (
    ChartStateError,
    CurationConfigError,
    CurationError,
    CurationTransportError,
    PostResolveError,
    ResolutionError,
    SourceFetchError,
)
from pycuration.models import (
    ChartMode,
    ChartState,
    ChartViewState,
    EfficiencyPoint,
    GuideLine,
    PostSnapshot,
    RewardEvent,
    RewardTable,
    RunningTotals,
    TargetPost,
    Vote,
)
from pycuration.surface import ChartSurface, RecordingSurface
from pycuration.tip import VoterTip, build_tips, prefetch_sequentially

__all__ = [
    "__version__",
    "ChartMode",
    "ChartState",
    "ChartStateError",
    "ChartSurface",
    "ChartViewState",
    "CurationClient",
    "CurationConfig",
    "CurationConfigError",
    "CurationError",
    "CurationTransportError",
    "EfficiencyAggregator",
    "EfficiencyChart",
    "EfficiencyPoint",
    "GuideLine",
    "HttpRewardSource",
    "PostCache",
    "PostResolveError",
    "PostResolver",
    "PostSnapshot",
    "RecordingSurface",
    "ResolutionError",
    "RewardEvent",
    "RewardSource",
    "RewardTable",
    "RunningTotals",
    "SourceFetchError",
    "TargetPost",
    "Vote",
    "VoterTip",
    "build_tips",
    "compute_point",
    "mean",
    "median",
    "prefetch_sequentially",
    "reward_window",
]
