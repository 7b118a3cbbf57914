"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Observer hooks for live fetches, fallbacks and storage errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..errors import ChainboardError
from .contracts import FallbackSource


class FetchObserver(Protocol):
    """Minimal instrumentation interface for the fallback chain."""

    def on_live(self, key: str) -> None:
        """Live fetch succeeded and was written to the cache."""

    def on_fallback(
        self, key: str, source: FallbackSource, error: ChainboardError
    ) -> None:
        """Live fetch failed; `source` is where the value came from instead."""

    def on_storage_error(self, key: str, reason: str) -> None:
        """Cache read or write failed and was absorbed."""


class NoOpFetchObserver:
    """Default observer when no instrumentation is configured."""

    def on_live(self, key: str) -> None:
        _ = key

    def on_fallback(
        self, key: str, source: FallbackSource, error: ChainboardError
    ) -> None:
        _ = key
        _ = source
        _ = error

    def on_storage_error(self, key: str, reason: str) -> None:
        _ = key
        _ = reason


@dataclass(slots=True)
class FetchEvent:
    kind: str
    key: str
    source: FallbackSource | None = None
    detail: str | None = None


@dataclass(slots=True)
class InMemoryFetchObserver:
    """Observer recording every event, for tests and diagnostics."""

    events: list[FetchEvent] = field(default_factory=list)

    def on_live(self, key: str) -> None:
        self.events.append(FetchEvent("live", key, FallbackSource.LIVE))

    def on_fallback(
        self, key: str, source: FallbackSource, error: ChainboardError
    ) -> None:
        self.events.append(FetchEvent("fallback", key, source, str(error)))

    def on_storage_error(self, key: str, reason: str) -> None:
        self.events.append(FetchEvent("storage_error", key, detail=reason))

    def kinds(self) -> list[str]:
        return [event.kind for event in self.events]
