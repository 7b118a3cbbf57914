"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dataset configuration and fallback result types.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from ..errors import ChainboardError

T = TypeVar("T")


class FallbackSource(str, Enum):
    """Which step of the fallback chain produced a value."""

    LIVE = "live"
    CACHED = "cached"
    STATIC = "static"


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded retry for transport failures on one live fetch."""

    max_retries: int = 2
    backoff_base_s: float = 0.5
    backoff_max_s: float = 8.0
    backoff_jitter_s: float = 0.15


NO_RETRY = RetryPolicy(max_retries=0, backoff_base_s=0.0, backoff_jitter_s=0.0)


@dataclass(frozen=True, slots=True)
class DatasetConfig(Generic[T]):
    """
    Everything the fallback chain needs to know about one logical dataset.

    Attributes:
        key: Cache key owned by this dataset alone.
        window_ms: Freshness window; entries older than this are stale.
        static_default: Checked-in last-resort value. Must not be None.
        version: Expected entry format version. Bumping it makes every
            previously written entry unreadable.
        initial_max_age_ms: Oldest cached entry usable as the first-paint
            placeholder. None accepts any age.
        fallback_max_age_ms: Oldest cached entry usable after a failed live
            fetch. None accepts any age.
        accept: Optional check on live values; a rejected value is handled
            exactly like a failed fetch.
        finalize: Optional transform applied to an accepted live value
            before it is cached and returned.
        retry: Retry policy applied to transport failures of the live fetch.
    """

    key: str
    window_ms: int
    static_default: T
    version: int | None = None
    initial_max_age_ms: int | None = None
    fallback_max_age_ms: int | None = None
    accept: Callable[[T], bool] | None = None
    finalize: Callable[[T], T] | None = None
    retry: RetryPolicy = NO_RETRY
    description: str = ""

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            raise ValueError("Dataset key must be non-empty")
        if self.window_ms < 0:
            raise ValueError(f"Dataset '{self.key}' window_ms must be >= 0")
        if self.static_default is None:
            raise ValueError(f"Dataset '{self.key}' must define a static default")

    def default(self) -> T:
        """Fresh copy of the static default so callers cannot mutate it."""
        return copy.deepcopy(self.static_default)


@dataclass(frozen=True, slots=True)
class FallbackResult(Generic[T]):
    """
    Outcome of a fetch-with-fallback: always carries a value.

    Attributes:
        source: Live, cached or static.
        value: The dataset value.
        cached_at: Write timestamp (Unix ms) when served from cache.
        error: Live failure absorbed on the way to a cached/static value.
    """

    source: FallbackSource
    value: T
    cached_at: int | None = None
    error: ChainboardError | None = None

    @classmethod
    def live(cls, value: T) -> FallbackResult[T]:
        return cls(FallbackSource.LIVE, value)

    @classmethod
    def cached(
        cls,
        value: T,
        *,
        cached_at: int,
        error: ChainboardError | None = None,
    ) -> FallbackResult[T]:
        return cls(FallbackSource.CACHED, value, cached_at=cached_at, error=error)

    @classmethod
    def static(cls, value: T, *, error: ChainboardError | None = None) -> FallbackResult[T]:
        return cls(FallbackSource.STATIC, value, error=error)

    @property
    def is_live(self) -> bool:
        return self.source is FallbackSource.LIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.value,
            "value": self.value,
            "cached_at": self.cached_at,
            "error": None if self.error is None else str(self.error),
        }
