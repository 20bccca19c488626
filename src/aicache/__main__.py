"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Serve cache statistics for the default feature caches.
"""

from __future__ import annotations

import logging

from .api import CacheStatsHost
from .cache.registry import FeatureCacheRegistry
from .settings import CacheSettings


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = CacheSettings.from_env()
    registry = FeatureCacheRegistry.with_default_features()
    host = CacheStatsHost(registry, sweep_interval_s=settings.sweep_interval_s)
    host.run(host=settings.stats_host, port=settings.stats_port)


if __name__ == "__main__":
    main()
