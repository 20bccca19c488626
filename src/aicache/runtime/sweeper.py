"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Background expiry sweeps for a feature cache registry.
"""

from __future__ import annotations

import asyncio
import logging

from ..cache.registry import FeatureCacheRegistry

logger = logging.getLogger("aicache.runtime.sweeper")


class ExpirySweeper:
    """
    Periodically remove expired entries from every registered cache.

    Reads already drop stale entries lazily; the sweep reclaims memory for
    keys that are never read again.
    """

    def __init__(
        self,
        registry: FeatureCacheRegistry,
        *,
        interval_s: float = 3600.0,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._registry = registry
        self._interval_s = interval_s
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def sweep_once(self) -> dict[str, int]:
        removed = self._registry.clear_all_expired()
        total = sum(removed.values())
        if total > 0:
            logger.info("Expiry sweep removed %d expired entries", total)
        return removed

    async def start(self) -> None:
        if self._running:
            raise RuntimeError("ExpirySweeper is already running")
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("ExpirySweeper started (interval=%.1fs)", self._interval_s)

    async def shutdown(self) -> None:
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        logger.info("ExpirySweeper shut down")

    async def _loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval_s)
                if not self._running:
                    break
                self.sweep_once()
            except asyncio.CancelledError:
                break
            except Exception:  # noqa: BLE001
                logger.exception("Expiry sweep failed")
