"""Vote model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from pycuration._constants import RSHARES_SCALE, VOTE_PERCENT_SCALE
from pycuration._normalize import safe_float, safe_int
from pycuration.models._base import CurationBaseModel


class Vote(CurationBaseModel):
    """A single entry of a post's ``active_votes``.

    Parameters
    ----------
    voter : str
        Account name of the voter.
    percent : int
        Vote weight in hundredths of a percent (``10000`` is 100%).
    rshares : float
        Raw reward shares contributed by the vote.
    """

    voter: str
    percent: int = 0
    rshares: float = 0.0

    @field_validator("voter")
    @classmethod
    def _normalize_voter(cls, value: str) -> str:
        voter = value.strip()
        if not voter:
            raise ValueError("voter must be non-empty")
        return voter

    @field_validator("percent", mode="before")
    @classmethod
    def _coerce_percent(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None else parsed

    @field_validator("rshares", mode="before")
    @classmethod
    def _coerce_rshares(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @property
    def scaled_rshares(self) -> float:
        """Rshares in the unit used by the reward tables (millions)."""
        return self.rshares / RSHARES_SCALE

    @property
    def weight_fraction(self) -> float:
        """Vote weight as a fraction (``1.0`` for a full vote)."""
        return self.percent / VOTE_PERCENT_SCALE


def find_vote(votes: list[Vote], voter: str) -> Vote | None:
    """Return the vote cast by *voter*, if any."""
    wanted = voter.strip()
    return next((vote for vote in votes if vote.voter == wanted), None)