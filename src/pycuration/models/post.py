"""Post models: the target post and historical post snapshots."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pycuration._normalize import safe_float
from pycuration.models._base import CurationBaseModel, Timestamp


class TargetPost(CurationBaseModel):
    """The post whose voters are being analysed."""

    author: str
    permlink: str
    created_at: Timestamp = Field(validation_alias=AliasChoices("created_at", "created"))


class PostSnapshot(CurationBaseModel):
    """Aggregate reward state of a historical post.

    Numeric fields accept both the snake_case and camelCase spellings
    that different node APIs return, and default to ``0`` when absent or
    unparseable so downstream validation can reject them.

    Parameters
    ----------
    author : str
        Post author.
    permlink : str
        Post permlink.
    created_at : datetime or None
        Creation time of the post, when known.
    total_vests : float
        Total curation vests paid out on the post.
    total_rshares : float
        Total rshares (in millions) of all votes on the post.
    total_payout_value : float
        Total payout value of the post in currency units.
    """

    author: str
    permlink: str
    created_at: Timestamp | None = Field(default=None, validation_alias=AliasChoices("created_at", "created"))
    total_vests: float = Field(default=0.0, validation_alias=AliasChoices("total_vests", "totalVests"))
    total_rshares: float = Field(default=0.0, validation_alias=AliasChoices("total_rshares", "totalRshares"))
    total_payout_value: float = Field(
        default=0.0,
        validation_alias=AliasChoices("total_payout_value", "totalPayoutValue"),
    )

    @field_validator("total_vests", "total_rshares", "total_payout_value", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float:
        if isinstance(value, str):
            # Payout values come back as "12.345 SBD".
            value = value.split(" ", 1)[0]
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @property
    def key(self) -> str:
        return f"{self.author}/{self.permlink}"
