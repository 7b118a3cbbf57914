"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Freshness windows and the age check applied to cache entries.
"""

from __future__ import annotations

from .types import CacheEntry, now_ms

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS

# Volatile market prices.
PRICE_WINDOW_MS = 60 * SECOND_MS
# Per-account balances.
BALANCE_WINDOW_MS = 2 * MINUTE_MS
# Semi-static analytics counters.
ANALYTICS_WINDOW_MS = 5 * MINUTE_MS
NETWORK_WINDOW_MS = 10 * MINUTE_MS
# General-purpose snapshots.
SNAPSHOT_WINDOW_MS = DAY_MS
# Expensive network-wide aggregates.
AGGREGATE_WINDOW_MS = WEEK_MS


def age_ms(entry: CacheEntry, now: int | None = None) -> int:
    """Milliseconds elapsed since the entry was written."""
    current = now_ms() if now is None else now
    return int(current - entry.timestamp)


def is_fresh(entry: CacheEntry, window_ms: int, now: int | None = None) -> bool:
    """Whether `entry` is at most `window_ms` old."""
    return age_ms(entry, now) <= window_ms
