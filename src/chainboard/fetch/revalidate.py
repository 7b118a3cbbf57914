"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Stale-while-revalidate orchestration.

`Revalidator.start()` returns immediately with the value to render now
(cached or static) and a task running the full fallback chain. When the task
resolves, its result replaces the displayed value unless a newer request for
the same key was started in the meantime; superseded results are ignored
rather than cancelled.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..cache.store import LocalCacheStore
from .contracts import DatasetConfig, FallbackResult
from .fallback import LiveFetch, fetch_with_fallback, initial_value
from .observer import FetchObserver, NoOpFetchObserver

T = TypeVar("T")

logger = logging.getLogger("chainboard.fetch.revalidate")

UpdateCallback = Callable[[str, FallbackResult[Any]], Awaitable[None] | None]


@dataclass(slots=True)
class Revalidation(Generic[T]):
    """
    One in-flight refresh of a dataset.

    Attributes:
        key: Dataset cache key.
        generation: Monotonic request number for `key`.
        initial: Value available before the network responds.
        task: Task resolving to the fallback-chain result.
    """

    key: str
    generation: int
    initial: FallbackResult[T]
    task: asyncio.Task[FallbackResult[T]]
    _revalidator: Revalidator = field(repr=False)

    @property
    def pending(self) -> bool:
        return not self.task.done()

    @property
    def superseded(self) -> bool:
        return self._revalidator.latest_generation(self.key) != self.generation

    async def wait(self) -> FallbackResult[T]:
        return await self.task


class Revalidator:
    """
    Tracks the displayed value per dataset and refreshes it in the background.

    Args:
        store: Local cache store shared by all datasets.
        observer: Instrumentation hooks for the fallback chain.
        on_update: Called with (key, result) whenever a non-superseded
            refresh replaces the displayed value.
    """

    def __init__(
        self,
        store: LocalCacheStore,
        *,
        observer: FetchObserver | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self._store = store
        self._observer = observer or NoOpFetchObserver()
        self._on_update = on_update
        self._generations: dict[str, int] = {}
        self._displayed: dict[str, FallbackResult[Any]] = {}
        self._inflight: dict[str, int] = {}

    def latest_generation(self, key: str) -> int:
        return self._generations.get(key, 0)

    def displayed(self, key: str) -> FallbackResult[Any] | None:
        """Value currently shown for `key`, if any request was started."""
        return self._displayed.get(key)

    def is_updating(self, key: str) -> bool:
        """Whether the newest refresh for `key` has not resolved yet."""
        return key in self._inflight

    def start(self, config: DatasetConfig[T], live_fetch: LiveFetch[T]) -> Revalidation[T]:
        """Show the placeholder now and schedule the fallback chain."""
        generation = self.latest_generation(config.key) + 1
        self._generations[config.key] = generation

        placeholder = self._displayed.get(config.key)
        if placeholder is None:
            placeholder = initial_value(config, self._store, observer=self._observer)
            self._displayed[config.key] = placeholder

        self._inflight[config.key] = generation
        task = asyncio.ensure_future(self._run(config, live_fetch, generation))
        return Revalidation(
            key=config.key,
            generation=generation,
            initial=placeholder,
            task=task,
            _revalidator=self,
        )

    async def _run(
        self,
        config: DatasetConfig[T],
        live_fetch: LiveFetch[T],
        generation: int,
    ) -> FallbackResult[T]:
        result = await fetch_with_fallback(
            config, live_fetch, store=self._store, observer=self._observer
        )

        if self.latest_generation(config.key) != generation:
            logger.debug(
                "Ignoring superseded result for '%s' (generation %d)", config.key, generation
            )
            return result

        self._inflight.pop(config.key, None)
        self._displayed[config.key] = result
        if self._on_update is not None:
            maybe = self._on_update(config.key, result)
            if inspect.isawaitable(maybe):
                await maybe
        return result
