"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/coalescing.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


class RequestCoalescer:
    """
    Deduplicate identical in-flight requests.

    Callers that ask for a key while a task for it is running await that
    same task and observe the same result or exception. Waiters are
    shielded, so cancelling one caller leaves the shared task running for
    the others.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def is_pending(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        # No await between lookup and registration.
        task = self._tasks.get(key)
        if task is None or task.done():
            task = asyncio.create_task(self._execute(key, factory))
            task.add_done_callback(lambda done: self._release(key, done))
            self._tasks[key] = task
        return await asyncio.shield(task)

    async def _execute(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            return await factory()
        finally:
            self._release(key, asyncio.current_task())

    def _release(self, key: str, task: asyncio.Task[Any] | None) -> None:
        if task is not None and self._tasks.get(key) is task:
            self._tasks.pop(key, None)
        if task is not None and task.done() and not task.cancelled():
            # Mark the exception as retrieved when every waiter went away.
            task.exception()

    def cancel_all(self) -> int:
        """Cancel and forget every in-flight task; return how many were cancelled."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        cancelled = 0
        for task in tasks:
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled
