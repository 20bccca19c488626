"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .coalescing import RequestCoalescer
from .fetcher import CachedFetcher, CachedResult, with_cache
from .prefetch import PrefetchState, Prefetcher
from .sweeper import ExpirySweeper

__all__ = [
    "CachedFetcher",
    "CachedResult",
    "ExpirySweeper",
    "PrefetchState",
    "Prefetcher",
    "RequestCoalescer",
    "with_cache",
]
