"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/registry.py.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..errors import CacheConfigError
from .base import CacheMetrics, CacheStats
from .inmemory import AICache
from .tiers import CACHE_TIERS, FEATURE_CACHE_TIER, get_cache_config, ttl_days_to_minutes

LOW_HIT_RATE = 0.3
HIGH_HIT_RATE = 0.7
NEARLY_FULL_RATIO = 0.9
NOTABLE_SAVINGS = 1.0
MONTHLY_FACTOR = 30


@dataclass(frozen=True, slots=True)
class CacheSummary:
    """Aggregate view over every registered feature cache."""

    hit_rate: float
    total_hits: int
    total_requests: int
    estimated_savings: float
    savings_per_month: float
    caches: dict[str, CacheStats] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)


def _feature_key(feature: str) -> str:
    return feature.strip()


class FeatureCacheRegistry:
    """
    Owns one `AICache` per AI feature.

    Construct once at application startup and pass it to the code that
    needs a feature cache.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        metrics: CacheMetrics | None = None,
    ) -> None:
        self._clock = clock
        self._metrics = metrics
        self._caches: dict[str, AICache[Any]] = {}

    @classmethod
    def with_default_features(
        cls,
        *,
        clock: Callable[[], float] = time.time,
        metrics: CacheMetrics | None = None,
    ) -> "FeatureCacheRegistry":
        registry = cls(clock=clock, metrics=metrics)
        for feature in FEATURE_CACHE_TIER:
            registry.create(feature)
        return registry

    def create(self, feature: str, *, tier: str | None = None) -> AICache[Any]:
        """Return the cache for `feature`, building it from its tier if absent."""
        key = _feature_key(feature)
        if not key:
            raise CacheConfigError("Feature name must be non-empty")

        existing = self._caches.get(key)
        if existing is not None:
            return existing

        if tier is None:
            config = get_cache_config(key)
        else:
            try:
                config = CACHE_TIERS[tier]
            except KeyError:
                raise CacheConfigError(f"Unknown cache tier '{tier}'") from None

        cache: AICache[Any] = AICache(
            max_size=config.max_size,
            ttl_minutes=ttl_days_to_minutes(config.ttl_days),
            cost_per_request=config.cost_per_request,
            name=key,
            clock=self._clock,
            metrics=self._metrics,
        )
        self._caches[key] = cache
        return cache

    def get(self, feature: str) -> AICache[Any]:
        try:
            return self._caches[_feature_key(feature)]
        except KeyError:
            raise CacheConfigError(f"No cache registered for feature '{feature}'") from None

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, str) and _feature_key(feature) in self._caches

    def features(self) -> list[str]:
        return sorted(self._caches)

    def clear_all_expired(self) -> dict[str, int]:
        """Sweep expired entries from every cache; return removed counts."""
        return {name: cache.clear_expired() for name, cache in self._caches.items()}

    def get_all_stats(self) -> dict[str, CacheStats]:
        return {name: cache.get_stats() for name, cache in self._caches.items()}

    def summarize(self) -> CacheSummary:
        stats = self.get_all_stats()
        total_hits = sum(row.hits for row in stats.values())
        total_requests = sum(row.requests for row in stats.values())
        total_savings = sum(row.estimated_savings for row in stats.values())
        hit_rate = total_hits / total_requests if total_requests > 0 else 0.0
        return CacheSummary(
            hit_rate=hit_rate,
            total_hits=total_hits,
            total_requests=total_requests,
            estimated_savings=total_savings,
            savings_per_month=total_savings * MONTHLY_FACTOR,
            caches=stats,
            recommendations=build_recommendations(stats, hit_rate, total_savings),
        )


def build_recommendations(
    stats: dict[str, CacheStats], hit_rate: float, total_savings: float
) -> list[str]:
    """Tuning hints derived from aggregate cache statistics."""
    recommendations: list[str] = []

    if hit_rate < LOW_HIT_RATE:
        recommendations.append(
            "Low cache hit rate (<30%). Consider increasing cache TTL or max size."
        )
    elif hit_rate > HIGH_HIT_RATE:
        recommendations.append(
            "Excellent cache hit rate (>70%). Caching is saving significant costs."
        )

    for name in sorted(stats):
        row = stats[name]
        if row.size >= row.max_size * NEARLY_FULL_RATIO:
            recommendations.append(
                f"The {name} cache is 90%+ full. Consider increasing max_size."
            )

    if total_savings > NOTABLE_SAVINGS:
        recommendations.append(f"Cache has saved ${total_savings:.2f} so far.")

    if not recommendations:
        recommendations.append("Cache is performing well. Keep monitoring.")
    return recommendations
