"""Base model and timestamp helpers for pycuration records.

Every record inherits from :class:`CurationBaseModel` which is frozen,
ignores unknown keys (API payloads carry far more than we use) and
accepts both field names and aliases.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime:
    """Convert epoch seconds, epoch milliseconds or an ISO string to a UTC datetime.

    Chain APIs report ``created`` as a naive ISO string in UTC; naive
    values are therefore tagged as UTC rather than local time.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        try:
            return parse_timestamp(float(text))
        except ValueError:
            pass
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    raise ValueError(f"unsupported timestamp value: {value!r}")


def to_epoch_ms(value: Any) -> int:
    """Epoch milliseconds for anything :func:`parse_timestamp` accepts."""
    return int(parse_timestamp(value).timestamp() * 1000)


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces epoch numbers and ISO strings to UTC datetimes."""


class CurationBaseModel(BaseModel):
    """Frozen base for all pycuration records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
