"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic cache keys for request parameter mappings.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


RECURSIVE_MARKER = "<recursive>"


def _mapping_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    return f"<{type(key).__name__}>{key}"


def _normalize(value: Any, seen: frozenset[int] = frozenset()) -> Any:
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        if id(value) in seen:
            return RECURSIVE_MARKER
        seen = seen | {id(value)}
    if isinstance(value, Mapping):
        return {_mapping_key(k): _normalize(v, seen) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item, seen) for item in value]
    if isinstance(value, (set, frozenset)):
        items = [_normalize(item, seen) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True, default=str))
    return value


def generate_cache_key(params: Mapping[str, Any]) -> str:
    """
    Build a stable cache key from request parameters.

    Parameter names are sorted, the mapping is serialized as canonical JSON
    and the result is lowercased. Two parameter mappings with the same pairs
    produce the same key regardless of insertion order.

    Non-string mapping keys keep their type, so `{1: v}` and `{"1": v}` differ.
    A container that contains itself is serialized as a fixed marker at the
    point of recursion.

    Lowercasing applies to values as well, so values that differ only in
    letter case map to the same key. Callers with case-sensitive parameters
    must not rely on this cache to tell them apart.
    """
    normalized = _normalize(params)
    serialized = json.dumps(
        normalized,
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return serialized.lower()


def key_preview(key: str, limit: int = 50) -> str:
    """Shorten a key for log output."""
    if len(key) <= limit:
        return key
    return f"{key[:limit]}..."
