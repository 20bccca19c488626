"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/prefetch.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

from ..keys import generate_cache_key, key_preview
from .fetcher import CachedFetcher

logger = logging.getLogger("aicache.runtime.prefetch")

T = TypeVar("T")


class PrefetchState(str, Enum):
    NOT_REQUESTED = "not_requested"
    PREFETCHING = "prefetching"
    CACHED = "cached"


class Prefetcher(Generic[T]):
    """
    Fire-and-forget cache warming on top of a `CachedFetcher`.

    Each key moves `NOT_REQUESTED -> PREFETCHING -> CACHED`, and back to
    `NOT_REQUESTED` when the fetch fails so a later call can retry.
    Failures are logged and never raised.
    """

    def __init__(self, fetcher: CachedFetcher[T]) -> None:
        self._fetcher = fetcher
        self._states: dict[str, PrefetchState] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._owners: dict[str, asyncio.Task[None]] = {}

    def state(self, params: Mapping[str, Any]) -> PrefetchState:
        return self._states.get(generate_cache_key(params), PrefetchState.NOT_REQUESTED)

    def prefetch(self, params: Mapping[str, Any]) -> bool:
        """
        Start warming the cache for `params` in the background.

        Must be called from inside a running event loop. Returns True when
        a background fetch was scheduled.
        """
        key = generate_cache_key(params)
        if self._states.get(key) is PrefetchState.PREFETCHING:
            return False
        if self._fetcher.cache.contains(params):
            self._states[key] = PrefetchState.CACHED
            return False

        self._states[key] = PrefetchState.PREFETCHING
        task = asyncio.create_task(self._run(key, dict(params)))
        self._owners[key] = task
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._settle(key, done))
        return True

    async def _run(self, key: str, params: dict[str, Any]) -> None:
        try:
            await self._fetcher.fetch(params)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Prefetch failed (key=%s): %s", key_preview(key), exc)
            self._release(key, asyncio.current_task())
            return
        if self._owners.get(key) is asyncio.current_task():
            self._states[key] = PrefetchState.CACHED

    def _release(self, key: str, task: asyncio.Task[Any] | None) -> None:
        # Only the task that owns the key may move it out of PREFETCHING.
        if task is None or self._owners.get(key) is not task:
            return
        self._owners.pop(key, None)
        if self._states.get(key) is PrefetchState.PREFETCHING:
            self._states.pop(key, None)

    def _settle(self, key: str, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        self._release(key, task)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def wait(self) -> None:
        """Wait for every scheduled prefetch to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def reset(self) -> None:
        """Cancel outstanding prefetches and forget all key states."""
        for task in list(self._tasks):
            task.cancel()
        self._owners.clear()
        self._states.clear()
