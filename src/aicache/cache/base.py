"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    """One cached AI response with expiry and hit bookkeeping."""

    value: T
    created_at_s: float
    expires_at_s: float
    hits: int = 0

    def is_expired(self, now_s: float) -> bool:
        return now_s > self.expires_at_s

    def priority(self, now_s: float) -> float:
        """Eviction priority; lower values are evicted first."""
        age_ms = (now_s - self.created_at_s) * 1000.0
        return self.hits + age_ms / 1_000_000


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Point-in-time counters for one cache instance."""

    hits: int
    misses: int
    size: int
    max_size: int
    hit_rate: float
    estimated_savings: float

    @property
    def requests(self) -> int:
        return self.hits + self.misses

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "maxSize": self.max_size,
            "hitRate": self.hit_rate,
            "estimatedSavings": self.estimated_savings,
        }


@dataclass(frozen=True, slots=True)
class CacheEntryInfo:
    """Monitoring row for one entry."""

    key: str
    hits: int
    age: str


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Stats plus the most frequently hit entries."""

    stats: CacheStats
    top_entries: list[CacheEntryInfo] = field(default_factory=list)


def format_age(age_s: float) -> str:
    """Render an entry age as whole days, hours or minutes."""
    minutes = int(age_s // 60)
    hours = minutes // 60
    days = hours // 24
    if days > 0:
        return f"{days}d"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


class CacheMetrics(Protocol):
    """Minimal metrics interface for cache instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCacheMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags
