"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Local cache store, freshness windows and pluggable key/value storage.
"""

from .freshness import (
    AGGREGATE_WINDOW_MS,
    ANALYTICS_WINDOW_MS,
    DAY_MS,
    HOUR_MS,
    MINUTE_MS,
    NETWORK_WINDOW_MS,
    PRICE_WINDOW_MS,
    SECOND_MS,
    SNAPSHOT_WINDOW_MS,
    WEEK_MS,
    age_ms,
    is_fresh,
)
from .storage import (
    FileStorage,
    InMemoryStorage,
    KeyValueStorage,
    RedisStorage,
    create_storage,
    create_storage_from_env,
    list_storage_backends,
    register_storage_backend,
)
from .store import LocalCacheStore, decode_entry, encode_entry
from .types import (
    CacheEntry,
    CacheError,
    CacheHit,
    CacheMiss,
    CacheRead,
    CacheWrite,
    JSONValue,
    WriteError,
    WriteOk,
    now_ms,
)

__all__ = [
    "CacheEntry",
    "CacheHit",
    "CacheMiss",
    "CacheError",
    "CacheRead",
    "CacheWrite",
    "WriteOk",
    "WriteError",
    "JSONValue",
    "now_ms",
    "LocalCacheStore",
    "decode_entry",
    "encode_entry",
    "age_ms",
    "is_fresh",
    "SECOND_MS",
    "MINUTE_MS",
    "HOUR_MS",
    "DAY_MS",
    "WEEK_MS",
    "PRICE_WINDOW_MS",
    "ANALYTICS_WINDOW_MS",
    "NETWORK_WINDOW_MS",
    "SNAPSHOT_WINDOW_MS",
    "AGGREGATE_WINDOW_MS",
    "KeyValueStorage",
    "InMemoryStorage",
    "FileStorage",
    "RedisStorage",
    "create_storage",
    "create_storage_from_env",
    "list_storage_backends",
    "register_storage_backend",
]
