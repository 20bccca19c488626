"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

AI response cache with request coalescing, prefetch and cost reporting.
"""

from .cache import (
    AICache,
    CACHE_TIERS,
    FEATURE_CACHE_TIER,
    CacheEntry,
    CacheInfo,
    CacheStats,
    CacheSummary,
    CacheTierConfig,
    FeatureCacheRegistry,
    get_cache_config,
)
from .errors import AICacheError, CacheConfigError, CacheFetchError
from .keys import generate_cache_key
from .runtime import (
    CachedFetcher,
    CachedResult,
    ExpirySweeper,
    PrefetchState,
    Prefetcher,
    RequestCoalescer,
    with_cache,
)
from .settings import CacheSettings

__all__ = [
    "AICache",
    "AICacheError",
    "CACHE_TIERS",
    "FEATURE_CACHE_TIER",
    "CacheConfigError",
    "CacheEntry",
    "CacheFetchError",
    "CacheInfo",
    "CacheSettings",
    "CacheStats",
    "CacheSummary",
    "CacheTierConfig",
    "CachedFetcher",
    "CachedResult",
    "ExpirySweeper",
    "FeatureCacheRegistry",
    "PrefetchState",
    "Prefetcher",
    "RequestCoalescer",
    "generate_cache_key",
    "get_cache_config",
    "with_cache",
]
