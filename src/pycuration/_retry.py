"""Bounded retry for post snapshot resolution."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pycuration._constants import SERVICE_UNAVAILABLE
from pycuration.exceptions import ResolutionError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_service_unavailable(exc: BaseException) -> bool:
    """Whether *exc* reports ``503 Service Unavailable``.

    Resolvers are third-party code, so the status may be carried as
    ``status_code``, ``status`` or ``code``, or only in the message.
    """
    for attr in ("status_code", "status", "code"):
        value = getattr(exc, attr, None)
        if value is None:
            continue
        try:
            if int(value) == SERVICE_UNAVAILABLE:
                return True
        except (TypeError, ValueError):
            continue
    return str(SERVICE_UNAVAILABLE) in str(exc)


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    backoff_on: Callable[[BaseException], bool] = is_service_unavailable,
    delay: float = 0.1,
    description: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call *fn* until it succeeds, at most *attempts* times.

    Failures matching *backoff_on* wait *delay* seconds before the next
    attempt. Any other failure is logged and retried immediately; it does
    not cut the budget short.

    Raises
    ------
    ResolutionError
        When every attempt failed. The last failure is chained as
        ``__cause__``.
    """
    if attempts <= 0:
        raise ValueError(f"attempts must be positive, got {attempts}")

    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            last_exc = exc
            if backoff_on(exc):
                if attempt == attempts:
                    _logger.debug("%s unavailable (attempt %d/%d), giving up", description, attempt, attempts)
                    continue
                _logger.debug(
                    "%s unavailable (attempt %d/%d), retrying in %.2fs",
                    description,
                    attempt,
                    attempts,
                    delay,
                )
                if delay > 0:
                    await sleep(delay)
            else:
                _logger.debug(
                    "%s failed (attempt %d/%d): %s",
                    description,
                    attempt,
                    attempts,
                    exc,
                    exc_info=True,
                )

    raise ResolutionError(
        f"{description} failed after {attempts} attempts",
        attempts=attempts,
    ) from last_exc
