"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by the cache and its fetch wrappers.
"""

from __future__ import annotations


class AICacheError(RuntimeError):
    """Base error for cache failures."""


class CacheConfigError(AICacheError):
    """Raised for invalid cache options or unknown tiers."""


class CacheFetchError(AICacheError):
    """Raised when the upstream fetch behind a cache miss fails."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
