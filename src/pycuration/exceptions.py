"""Custom exception hierarchy for pycuration."""

from __future__ import annotations


class CurationError(Exception):
    """Base exception for all pycuration errors."""


class CurationConfigError(CurationError):
    """Invalid or missing configuration."""


class CurationTransportError(CurationError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SourceFetchError(CurationTransportError):
    """The reward-history window could not be fetched.

    Fatal for an aggregator run: nothing is emitted and the error is
    re-raised to the caller.
    """


class PostResolveError(CurationTransportError):
    """A post snapshot could not be resolved.

    Resolvers raise this with ``status_code=503`` when the upstream node
    is temporarily unavailable so the retry loop can back off.
    """


class ResolutionError(CurationError):
    """Post snapshot resolution failed on every attempt.

    Event-local: the aggregator logs it and skips the reward event.
    """

    def __init__(self, message: str, *, attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(message)


class ChartStateError(CurationError):
    """Chart operation attempted after the chart was destroyed."""
