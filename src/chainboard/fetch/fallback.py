"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Fallback-chain fetcher: live -> cached -> static.

Every call walks the chain in fixed priority order. A successful live fetch
is written to the local cache (refreshing its timestamp) and returned. A
failed one is logged and reported to the observer, then the last cached
value is returned regardless of its age unless the dataset caps
`fallback_max_age_ms`. With nothing cached the dataset's static default is
returned, so the caller always gets a value.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..cache.store import LocalCacheStore
from ..cache.types import CacheError, CacheHit, CacheRead, WriteError
from ..errors import SchemaValidationFailure, classify_error
from .contracts import DatasetConfig, FallbackResult, FallbackSource
from .observer import FetchObserver, NoOpFetchObserver
from .retry import call_with_retry

T = TypeVar("T")

logger = logging.getLogger("chainboard.fetch")

LiveFetch = Callable[[], Awaitable[T]]


def _read_cached(
    config: DatasetConfig[T],
    store: LocalCacheStore,
    max_age_ms: int | None,
) -> CacheRead:
    if max_age_ms is None:
        return store.read_result(config.key, version=config.version)
    return store.read_fresh_result(config.key, max_age_ms, version=config.version)


def cached_initial_value(
    config: DatasetConfig[T],
    store: LocalCacheStore,
    *,
    observer: FetchObserver | None = None,
) -> FallbackResult[T] | None:
    """
    Cached placeholder, subject to `initial_max_age_ms` rather than the
    freshness window. None when nothing usable is cached.
    """
    result = _read_cached(config, store, config.initial_max_age_ms)
    if isinstance(result, CacheHit):
        return FallbackResult.cached(result.entry.value, cached_at=result.entry.timestamp)
    if isinstance(result, CacheError):
        (observer or NoOpFetchObserver()).on_storage_error(config.key, result.reason)
    return None


def initial_value(
    config: DatasetConfig[T],
    store: LocalCacheStore,
    *,
    observer: FetchObserver | None = None,
) -> FallbackResult[T]:
    """
    Value to render before any live fetch resolves: the cached placeholder,
    else the static default. Never touches the network.
    """
    cached = cached_initial_value(config, store, observer=observer)
    if cached is not None:
        return cached
    return FallbackResult.static(config.default())


def needs_refresh(config: DatasetConfig[T], store: LocalCacheStore) -> bool:
    """Whether the cached entry is missing, unreadable or outside its window."""
    result = store.read_fresh_result(config.key, config.window_ms, version=config.version)
    return not isinstance(result, CacheHit)


async def fetch_with_fallback(
    config: DatasetConfig[T],
    live_fetch: LiveFetch[T],
    *,
    store: LocalCacheStore,
    observer: FetchObserver | None = None,
) -> FallbackResult[T]:
    """Resolve one dataset through the live -> cached -> static chain."""
    obs = observer or NoOpFetchObserver()

    try:
        value = await call_with_retry(live_fetch, policy=config.retry)
        if config.accept is not None and not config.accept(value):
            raise SchemaValidationFailure(
                f"Live value for '{config.key}' rejected by acceptance check"
            )
        if config.finalize is not None:
            value = config.finalize(value)
    except asyncio.CancelledError:
        raise
    except Exception as e:  # noqa: BLE001
        error = classify_error(e)
        logger.warning(
            "Live fetch for '%s' failed (%s): %s",
            config.key,
            type(error).__name__,
            error,
        )
    else:
        written = store.write_result(config.key, value, version=config.version)
        if isinstance(written, WriteError):
            obs.on_storage_error(config.key, written.reason)
        obs.on_live(config.key)
        return FallbackResult.live(value)

    cached = _read_cached(config, store, config.fallback_max_age_ms)
    if isinstance(cached, CacheHit):
        logger.info("Serving cached '%s' written at %d", config.key, cached.entry.timestamp)
        obs.on_fallback(config.key, FallbackSource.CACHED, error)
        return FallbackResult.cached(
            cached.entry.value,
            cached_at=cached.entry.timestamp,
            error=error,
        )
    if isinstance(cached, CacheError):
        obs.on_storage_error(config.key, cached.reason)

    logger.info("Serving static default for '%s'", config.key)
    obs.on_fallback(config.key, FallbackSource.STATIC, error)
    return FallbackResult.static(config.default(), error=error)
