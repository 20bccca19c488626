"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bounded in-memory cache for AI responses.

Entries expire after a per-instance TTL. When the cache is full, an expired
entry is reclaimed if one is found; otherwise the entry with the lowest
priority (hits plus a slow age term) is evicted.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from ..errors import CacheConfigError
from ..keys import generate_cache_key, key_preview
from .base import (
    CacheEntry,
    CacheEntryInfo,
    CacheInfo,
    CacheMetrics,
    CacheStats,
    NoOpCacheMetrics,
    format_age,
)

logger = logging.getLogger("aicache.cache")

T = TypeVar("T")

DEFAULT_MAX_SIZE = 1000
DEFAULT_TTL_MINUTES = 60 * 24 * 7
DEFAULT_COST_PER_REQUEST = 0.001
TOP_ENTRIES_LIMIT = 10


class AICache(Generic[T]):
    """
    Process-local TTL cache keyed by request parameters.

    All operations are synchronous. The instance holds unlocked mutable
    state and must only be used from one event loop thread.
    """

    def __init__(
        self,
        *,
        max_size: int | None = None,
        ttl_minutes: float | None = None,
        cost_per_request: float | None = None,
        name: str = "default",
        clock: Callable[[], float] = time.time,
        metrics: CacheMetrics | None = None,
    ) -> None:
        max_size = DEFAULT_MAX_SIZE if max_size is None else max_size
        ttl_minutes = DEFAULT_TTL_MINUTES if ttl_minutes is None else ttl_minutes
        cost_per_request = (
            DEFAULT_COST_PER_REQUEST if cost_per_request is None else cost_per_request
        )
        if max_size <= 0:
            raise CacheConfigError("max_size must be > 0")
        if not math.isfinite(ttl_minutes) or ttl_minutes <= 0:
            raise CacheConfigError("ttl_minutes must be a finite value > 0")
        if not math.isfinite(cost_per_request) or cost_per_request < 0:
            raise CacheConfigError("cost_per_request must be >= 0")

        self.name = name
        self.max_size = int(max_size)
        self.ttl_s = float(ttl_minutes) * 60.0
        now = clock()
        if now + self.ttl_s <= now:
            raise CacheConfigError("ttl_minutes is too small to advance the clock")
        self.cost_per_request = float(cost_per_request)
        self._clock = clock
        self._metrics: CacheMetrics = metrics or NoOpCacheMetrics()
        self._rows: dict[str, CacheEntry[T]] = {}
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, params: object) -> bool:
        if not isinstance(params, Mapping):
            return False
        return self.contains(params)

    def _tags(self, **extra: str) -> dict[str, str]:
        return {"cache": self.name, **extra}

    def _record_miss(self) -> None:
        self._misses += 1
        self._metrics.incr("cache_misses_total", tags=self._tags())

    def contains(self, params: Mapping[str, Any]) -> bool:
        """Whether a live entry exists, without touching hit/miss counters."""
        key = generate_cache_key(params)
        row = self._rows.get(key)
        if row is None:
            return False
        if row.is_expired(self._clock()):
            self._rows.pop(key, None)
            return False
        return True

    def get(self, params: Mapping[str, Any], default: Any = None) -> T | Any:
        """Return the cached value for ``params`` or ``default`` on a miss."""
        key = generate_cache_key(params)
        row = self._rows.get(key)
        if row is None:
            self._record_miss()
            return default

        if row.is_expired(self._clock()):
            self._rows.pop(key, None)
            self._record_miss()
            return default

        row.hits += 1
        self._hits += 1
        self._metrics.incr("cache_hits_total", tags=self._tags())
        logger.debug(
            "Cache hit (cache=%s, key=%s, hits=%d)",
            self.name,
            key_preview(key),
            row.hits,
        )
        return row.value

    def set(self, params: Mapping[str, Any], value: T) -> None:
        """Insert or overwrite the entry for ``params``."""
        key = generate_cache_key(params)
        if len(self._rows) >= self.max_size and key not in self._rows:
            self._evict()

        now = self._clock()
        # Keep expires_at strictly after created_at for any clock magnitude.
        expires_at = max(now + self.ttl_s, math.nextafter(now, math.inf))
        self._rows[key] = CacheEntry(
            value=value,
            created_at_s=now,
            expires_at_s=expires_at,
            hits=0,
        )
        self._metrics.incr("cache_sets_total", tags=self._tags())
        logger.debug(
            "Cache set (cache=%s, key=%s, size=%d/%d)",
            self.name,
            key_preview(key),
            len(self._rows),
            self.max_size,
        )

    def _evict(self) -> None:
        now = self._clock()
        victim: str | None = None
        lowest = float("inf")

        for key, row in self._rows.items():
            if row.is_expired(now):
                del self._rows[key]
                self._metrics.incr(
                    "cache_evictions_total", tags=self._tags(reason="expired")
                )
                logger.debug(
                    "Cache evict expired (cache=%s, key=%s)", self.name, key_preview(key)
                )
                return

            priority = row.priority(now)
            if priority < lowest:
                lowest = priority
                victim = key

        if victim is not None:
            del self._rows[victim]
            self._metrics.incr(
                "cache_evictions_total", tags=self._tags(reason="priority")
            )
            logger.debug(
                "Cache evict lowest priority (cache=%s, key=%s)",
                self.name,
                key_preview(victim),
            )

    def clear(self) -> None:
        """Drop every entry and reset hit/miss counters."""
        size = len(self._rows)
        self._rows.clear()
        self._hits = 0
        self._misses = 0
        logger.debug("Cache cleared (cache=%s, size=%d)", self.name, size)

    def clear_expired(self) -> int:
        """Remove all entries that are expired right now; return the count."""
        now = self._clock()
        expired = [key for key, row in self._rows.items() if row.is_expired(now)]
        for key in expired:
            del self._rows[key]

        if expired:
            self._metrics.incr(
                "cache_expired_removed_total", len(expired), tags=self._tags()
            )
            logger.debug(
                "Cache cleanup (cache=%s, removed=%d)", self.name, len(expired)
            )
        return len(expired)

    def get_stats(self) -> CacheStats:
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._rows),
            max_size=self.max_size,
            hit_rate=hit_rate,
            estimated_savings=self._hits * self.cost_per_request,
        )

    def get_info(self) -> CacheInfo:
        """Stats plus the most frequently hit entries, for monitoring."""
        now = self._clock()
        ranked = sorted(self._rows.items(), key=lambda item: item[1].hits, reverse=True)
        top = [
            CacheEntryInfo(
                key=key[:100],
                hits=row.hits,
                age=format_age(now - row.created_at_s),
            )
            for key, row in ranked[:TOP_ENTRIES_LIMIT]
        ]
        return CacheInfo(stats=self.get_stats(), top_entries=top)
