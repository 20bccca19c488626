"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache settings and explicit environment loading.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .cache.base import CacheMetrics
from .cache.inmemory import (
    DEFAULT_COST_PER_REQUEST,
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_MINUTES,
    AICache,
)


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Explicit settings for standalone caches and the stats service."""

    max_size: int = DEFAULT_MAX_SIZE
    ttl_minutes: float = DEFAULT_TTL_MINUTES
    cost_per_request: float = DEFAULT_COST_PER_REQUEST
    sweep_interval_s: float = 3600.0
    stats_host: str = "127.0.0.1"
    stats_port: int = 8085

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from environment variables."""
        return CacheSettings(
            max_size=int(os.getenv("AICACHE_MAX_SIZE", str(DEFAULT_MAX_SIZE))),
            ttl_minutes=float(
                os.getenv("AICACHE_TTL_MINUTES", str(DEFAULT_TTL_MINUTES))
            ),
            cost_per_request=float(
                os.getenv("AICACHE_COST_PER_REQUEST", str(DEFAULT_COST_PER_REQUEST))
            ),
            sweep_interval_s=float(os.getenv("AICACHE_SWEEP_INTERVAL_S", "3600")),
            stats_host=os.getenv("AICACHE_STATS_HOST", "127.0.0.1"),
            stats_port=int(os.getenv("AICACHE_STATS_PORT", "8085")),
        )

    def build_cache(
        self,
        name: str = "default",
        *,
        clock: Callable[[], float] = time.time,
        metrics: CacheMetrics | None = None,
    ) -> AICache[Any]:
        return AICache(
            max_size=self.max_size,
            ttl_minutes=self.ttl_minutes,
            cost_per_request=self.cost_per_request,
            name=name,
            clock=clock,
            metrics=metrics,
        )
