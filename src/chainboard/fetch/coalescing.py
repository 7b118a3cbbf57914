"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Single-flight deduplication of concurrent requests for the same dataset.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


class RequestCoalescer:
    """Deduplicate identical in-flight requests by key."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}
        self._lock = asyncio.Lock()

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            task = self._tasks.get(key)
            owner = task is None
            if task is None:
                task = asyncio.ensure_future(factory())
                self._tasks[key] = task

        try:
            return await asyncio.shield(task)
        finally:
            if owner:
                async with self._lock:
                    if self._tasks.get(key) is task:
                        self._tasks.pop(key, None)

    def in_flight(self) -> list[str]:
        return sorted(self._tasks)
