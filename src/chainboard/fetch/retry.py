"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bounded exponential-backoff retry for live fetches.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..errors import ChainboardError, TransportFailure, classify_error
from .contracts import RetryPolicy

T = TypeVar("T")


def backoff_delay(attempt: int, policy: RetryPolicy) -> float:
    """Exponential backoff with additive jitter, capped at `backoff_max_s`."""
    base = min(policy.backoff_max_s, policy.backoff_base_s * (2**attempt))
    jitter = random.uniform(0.0, policy.backoff_jitter_s) if policy.backoff_jitter_s > 0 else 0.0
    return max(0.0, base + jitter)


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
) -> T:
    """Execute callable, retrying transport failures under `policy`."""
    last: ChainboardError | None = None
    for attempt in range(policy.max_retries + 1):
        try:
            return await fn()
        except asyncio.CancelledError:
            raise
        except Exception as error:
            classified = classify_error(error)
            last = classified
            if isinstance(classified, TransportFailure) and attempt < policy.max_retries:
                await asyncio.sleep(backoff_delay(attempt, policy))
                continue
            if classified is error:
                raise
            raise classified from error
    raise ChainboardError("Retry loop exhausted") from last
