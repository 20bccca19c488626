"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for cache observability.
"""

from __future__ import annotations

from collections.abc import Mapping

from .cache.base import CacheMetrics

# name -> (documentation, label names) for every counter `AICache` emits.
CACHE_COUNTERS: dict[str, tuple[str, tuple[str, ...]]] = {
    "cache_hits_total": ("Lookups served from a live cache entry.", ("cache",)),
    "cache_misses_total": ("Lookups that found no live entry.", ("cache",)),
    "cache_sets_total": ("Entries written or overwritten.", ("cache",)),
    "cache_evictions_total": (
        "Entries evicted to make room, by reason (expired or priority).",
        ("cache", "reason"),
    ),
    "cache_expired_removed_total": (
        "Expired entries removed by clear_expired sweeps.",
        ("cache",),
    ),
}


class PrometheusCacheMetrics(CacheMetrics):
    """
    Prometheus-backed cache metrics adapter.

    The known cache counters are registered up front with fixed label sets,
    so they show up on a scrape before the first event. Any other name is
    registered lazily with the labels of its first call.

    Requires `prometheus_client` package.
    """

    def __init__(self, *, namespace: str = "aicache", registry=None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCacheMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._registry = registry if registry is not None else REGISTRY
        self._counters: dict[str, tuple[object, tuple[str, ...]]] = {}
        for name, (documentation, label_names) in CACHE_COUNTERS.items():
            self._register(name, documentation, label_names)

    def _register(
        self, name: str, documentation: str, label_names: tuple[str, ...]
    ) -> tuple[object, tuple[str, ...]]:
        counter = self._Counter(
            name=name,
            documentation=documentation,
            namespace=self._namespace,
            labelnames=label_names,
            registry=self._registry,
        )
        self._counters[name] = (counter, label_names)
        return self._counters[name]

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        tags = tags or {}
        entry = self._counters.get(name)
        if entry is None:
            entry = self._register(
                name, f"AI cache metric {name}", tuple(sorted(tags.keys()))
            )

        counter, label_names = entry
        if label_names:
            counter.labels(*[str(tags.get(label, "")) for label in label_names]).inc(value)
        else:
            counter.inc(value)
