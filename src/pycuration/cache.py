"""Request-collapsing cache for historical post snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol

from pycuration.models.post import PostSnapshot

_logger = logging.getLogger(__name__)


class PostResolver(Protocol):
    """Resolves a post's aggregate reward state as of a point in time.

    Implementations fetch the post details, its votes and its curation
    vest totals. Unavailability should be reported by raising
    :class:`~pycuration.exceptions.PostResolveError` with
    ``status_code=503``.
    """

    async def resolve(self, author: str, permlink: str, as_of: datetime | int) -> PostSnapshot | None:
        ...


def cache_key(author: str, permlink: str) -> str:
    return f"{author}/{permlink}"


class PostCache:
    """Share one resolution per ``author/permlink`` among all callers.

    The first request for a key starts the resolver and stores its task.
    Every later request for that key awaits the same task, even when it
    asks for a different ``as_of`` time: the first caller's time fixes
    the snapshot for the lifetime of the cache. Historical snapshots of
    the same post rarely differ enough to matter for the efficiency
    curve, so this is accepted as an approximation.

    Failed resolutions stay cached as well. Retrying is the caller's job
    and happens on top of the shared result.

    Callers receive a shield of the stored task, so cancelling one waiter
    never cancels the resolution other waiters depend on.

    One cache is meant to be created per session and passed to every
    aggregator run that should share it.
    """

    def __init__(self, resolver: PostResolver) -> None:
        self._resolver = resolver
        self._entries: dict[str, asyncio.Future[PostSnapshot | None]] = {}

    def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[PostSnapshot | None]],
    ) -> asyncio.Future[PostSnapshot | None]:
        """Return a shielded view of the shared task for *key*, starting *factory* on first use."""
        entry = self._entries.get(key)
        if entry is None:
            _logger.debug("Post cache miss key=%s", key)
            entry = asyncio.ensure_future(factory())
            self._entries[key] = entry
        return asyncio.shield(entry)

    def resolve(self, author: str, permlink: str, as_of: datetime | int) -> asyncio.Future[PostSnapshot | None]:
        """Shared resolution of ``author/permlink``; *as_of* only counts on a miss."""
        return self.get_or_create(
            cache_key(author, permlink),
            lambda: self._resolver.resolve(author, permlink, as_of),
        )

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
