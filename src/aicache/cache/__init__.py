"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import (
    CacheEntry,
    CacheEntryInfo,
    CacheInfo,
    CacheMetrics,
    CacheStats,
    NoOpCacheMetrics,
)
from .inmemory import AICache
from .registry import CacheSummary, FeatureCacheRegistry, build_recommendations
from .tiers import (
    CACHE_TIERS,
    FEATURE_CACHE_TIER,
    CacheTierConfig,
    get_cache_config,
    ttl_days_to_minutes,
    ttl_days_to_seconds,
)

__all__ = [
    "AICache",
    "CACHE_TIERS",
    "FEATURE_CACHE_TIER",
    "CacheEntry",
    "CacheEntryInfo",
    "CacheInfo",
    "CacheMetrics",
    "CacheStats",
    "CacheSummary",
    "CacheTierConfig",
    "FeatureCacheRegistry",
    "NoOpCacheMetrics",
    "build_recommendations",
    "get_cache_config",
    "ttl_days_to_minutes",
    "ttl_days_to_seconds",
]
