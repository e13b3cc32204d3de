"""Curation reward history models."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import Field, field_validator

from pycuration._normalize import safe_float, safe_int
from pycuration.models._base import CurationBaseModel

# Column names used by the reward history API.
TIME_COL = "time"
AUTHOR_COL = "author"
PERMLINK_COL = "permlink"
VESTS_COL = "vests"


class RewardEvent(CurationBaseModel):
    """One historical curation reward received by a voter.

    ``time_sec`` is ``0`` when the row carried no usable timestamp; such
    events are treated as missing data downstream.
    """

    time_sec: int = 0
    author: str = ""
    permlink: str = ""
    vests: float = 0.0

    @field_validator("time_sec", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None else parsed

    @field_validator("vests", mode="before")
    @classmethod
    def _coerce_vests(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @field_validator("author", "permlink", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)


class RewardTable(CurationBaseModel):
    """Column-indexed reward rows as returned by the reward history API.

    Parameters
    ----------
    rows : list of list
        Fixed-width tuples in source order.
    cols : dict
        Mapping of column name to tuple index.
    """

    rows: list[list[Any]] = Field(default_factory=list)
    cols: dict[str, int] = Field(default_factory=dict)

    @field_validator("rows", mode="before")
    @classmethod
    def _coerce_rows(cls, value: Any) -> list[list[Any]]:
        if not isinstance(value, (list, tuple)):
            return []
        return [list(row) for row in value if isinstance(row, (list, tuple))]

    @field_validator("cols", mode="before")
    @classmethod
    def _coerce_cols(cls, value: Any) -> dict[str, int]:
        if not isinstance(value, dict):
            return {}
        cols: dict[str, int] = {}
        for name, index in value.items():
            parsed = safe_int(index)
            if parsed is not None and parsed >= 0:
                cols[str(name)] = parsed
        return cols

    def _cell(self, row: list[Any], column: str) -> Any:
        index = self.cols.get(column)
        if index is None or index >= len(row):
            return None
        return row[index]

    def events(self) -> Iterator[RewardEvent]:
        """Yield one :class:`RewardEvent` per row, preserving row order."""
        for row in self.rows:
            yield RewardEvent(
                time_sec=self._cell(row, TIME_COL),
                author=self._cell(row, AUTHOR_COL),
                permlink=self._cell(row, PERMLINK_COL),
                vests=self._cell(row, VESTS_COL),
            )

    def __len__(self) -> int:
        return len(self.rows)
