"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Fallback-chain fetching, retries and stale-while-revalidate refreshes.
"""

from .coalescing import RequestCoalescer
from .contracts import (
    NO_RETRY,
    DatasetConfig,
    FallbackResult,
    FallbackSource,
    RetryPolicy,
)
from .fallback import (
    cached_initial_value,
    fetch_with_fallback,
    initial_value,
    needs_refresh,
)
from .observer import (
    FetchEvent,
    FetchObserver,
    InMemoryFetchObserver,
    NoOpFetchObserver,
)
from .retry import backoff_delay, call_with_retry
from .revalidate import Revalidation, Revalidator

__all__ = [
    "DatasetConfig",
    "FallbackResult",
    "FallbackSource",
    "RetryPolicy",
    "NO_RETRY",
    "fetch_with_fallback",
    "initial_value",
    "cached_initial_value",
    "needs_refresh",
    "FetchObserver",
    "NoOpFetchObserver",
    "InMemoryFetchObserver",
    "FetchEvent",
    "backoff_delay",
    "call_with_retry",
    "RequestCoalescer",
    "Revalidation",
    "Revalidator",
]
