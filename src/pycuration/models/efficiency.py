"""Efficiency points and running totals."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pycuration.models._base import CurationBaseModel


class EfficiencyPoint(CurationBaseModel):
    """One plotted curation efficiency observation.

    Parameters
    ----------
    ts_ms : int
        Reward time in epoch milliseconds.
    efficiency : int
        Reward share received over influence share contributed, in percent.
    weighted_eff : int
        ``efficiency`` scaled by the vote weight fraction.
    voter_reward_value : float
        Currency value of the voter's reward share.
    total_value : float
        Total payout value of the historical post.
    same_author : bool
        Whether the historical post shares the target post's author.
    """

    ts_ms: int
    efficiency: float
    weighted_eff: float
    voter_reward_value: float = 0.0
    total_value: float = 0.0
    same_author: bool = False


class RunningTotals(BaseModel):
    """Totals accumulated by one aggregator run.

    Mutable and owned by a single run; listeners receive copies.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    count: int = 0
    weighted_eff_avg: float = 0.0
    total_curation_reward: float = 0.0
    contributed_value: float = 0.0
    same_author_count: int = 0

    def record(self, point: EfficiencyPoint, contributed_value: float) -> None:
        """Account for an emitted point and the value the voter contributed."""
        self.count += 1
        self.weighted_eff_avg += (point.weighted_eff - self.weighted_eff_avg) / self.count
        self.contributed_value += contributed_value
        self.total_curation_reward += point.voter_reward_value
