"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache-populating fetch wrappers.

`CachedFetcher` checks the cache, joins an in-flight request for the same
key when there is one, and otherwise calls the upstream fetch once and
stores its result.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..cache.inmemory import AICache
from ..errors import CacheFetchError
from ..keys import generate_cache_key, key_preview
from .coalescing import RequestCoalescer

logger = logging.getLogger("aicache.runtime.fetcher")

T = TypeVar("T")

FetchFn = Callable[[Mapping[str, Any]], Awaitable[T]]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class CachedResult(Generic[T]):
    """Fetched value plus whether it was served from the cache."""

    data: T
    from_cache: bool


class CachedFetcher(Generic[T]):
    """Read-through cache wrapper with in-flight request de-duplication."""

    def __init__(
        self,
        cache: AICache[T],
        fetch: FetchFn[T],
        *,
        coalescer: RequestCoalescer | None = None,
    ) -> None:
        self.cache = cache
        self._fetch = fetch
        self._coalescer = coalescer or RequestCoalescer()

    async def fetch(self, params: Mapping[str, Any]) -> T:
        result = await self.fetch_with_meta(params)
        return result.data

    async def fetch_with_meta(self, params: Mapping[str, Any]) -> CachedResult[T]:
        cached = self.cache.get(params, _MISSING)
        if cached is not _MISSING:
            return CachedResult(data=cached, from_cache=True)

        key = generate_cache_key(params)
        snapshot = dict(params)

        async def _load() -> T:
            try:
                value = await self._fetch(snapshot)
            except CacheFetchError:
                raise
            except Exception as exc:
                logger.warning(
                    "Upstream fetch failed (cache=%s, key=%s): %s",
                    self.cache.name,
                    key_preview(key),
                    exc,
                )
                raise CacheFetchError(
                    f"Failed to fetch value for '{self.cache.name}'", key=key
                ) from exc
            self.cache.set(snapshot, value)
            return value

        data = await self._coalescer.run(key, _load)
        return CachedResult(data=data, from_cache=False)

    def is_loading(self, params: Mapping[str, Any]) -> bool:
        return self._coalescer.is_pending(generate_cache_key(params))

    def clear(self) -> None:
        """Clear the cache and cancel in-flight requests."""
        cancelled = self._coalescer.cancel_all()
        self.cache.clear()
        if cancelled:
            logger.debug(
                "Cancelled %d pending request(s) (cache=%s)", cancelled, self.cache.name
            )


async def with_cache(
    cache: AICache[T],
    params: Mapping[str, Any],
    fetch_fn: Callable[[], Awaitable[T]],
) -> CachedResult[T]:
    """Serve `params` from `cache`, calling `fetch_fn` and storing on a miss."""
    cached = cache.get(params, _MISSING)
    if cached is not _MISSING:
        return CachedResult(data=cached, from_cache=True)

    data = await fetch_fn()
    cache.set(params, data)
    return CachedResult(data=data, from_cache=False)
