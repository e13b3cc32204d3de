"""Client configuration for pycuration."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycuration._constants import REWARDS_BASE_URL
from pycuration.exceptions import CurationConfigError


@dataclasses.dataclass(frozen=True)
class CurationConfig:
    """Pipeline and client configuration.

    Parameters
    ----------
    rewards_base_url : str
        Base URL of the curation reward history API.
    days : int
        How many days of voting history to analyse before the target
        post was created.
    retry_attempts : int
        Attempts per post snapshot resolution before the reward event is
        skipped.
    retry_delay : float
        Seconds to back off after a ``503 Service Unavailable`` failure.
    throttle_delay : float
        Seconds to wait between reward events, limiting load on the
        post resolver.
    request_timeout : float
        Total HTTP timeout in seconds for the reward history request.
    y_pad : int
        Head room added above the highest plotted value.
    y_baseline_min : int
        Lower bound of the efficiency axis.
    currency_symbol : str
        Symbol used when formatting reward values.
    """

    rewards_base_url: str = REWARDS_BASE_URL
    days: int = 7
    retry_attempts: int = 5
    retry_delay: float = 0.1
    throttle_delay: float = 0.05
    request_timeout: float = 30.0
    y_pad: int = 5
    y_baseline_min: int = 0
    currency_symbol: str = "$"

    def __post_init__(self) -> None:
        if self.days <= 0:
            raise CurationConfigError(f"days must be positive, got {self.days}")
        if self.retry_attempts <= 0:
            raise CurationConfigError(f"retry_attempts must be positive, got {self.retry_attempts}")
        for name in ("retry_delay", "throttle_delay"):
            value = getattr(self, name)
            if value < 0:
                raise CurationConfigError(f"{name} must not be negative, got {value}")
        if self.request_timeout <= 0:
            raise CurationConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> CurationConfig:
        """Create configuration from ``CURATION_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        CurationConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, type]] = {
            "CURATION_REWARDS_BASE_URL": ("rewards_base_url", str),
            "CURATION_DAYS": ("days", int),
            "CURATION_RETRY_ATTEMPTS": ("retry_attempts", int),
            "CURATION_RETRY_DELAY": ("retry_delay", float),
            "CURATION_THROTTLE_DELAY": ("throttle_delay", float),
            "CURATION_REQUEST_TIMEOUT": ("request_timeout", float),
            "CURATION_Y_PAD": ("y_pad", int),
            "CURATION_Y_BASELINE_MIN": ("y_baseline_min", int),
            "CURATION_CURRENCY_SYMBOL": ("currency_symbol", str),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, cast) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = cast(val.strip())
            except ValueError as exc:
                raise CurationConfigError(f"{env_key} is not a valid {cast.__name__}: {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
