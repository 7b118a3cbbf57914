"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Local cache store: JSON + timestamp + version entries on top of a key/value
storage backend.

Reads and writes never raise. Every failure mode (missing key, unparseable
payload, wrong shape, outdated version, storage errors) is reported through
the typed `CacheRead`/`CacheWrite` results and collapses to "absent" / no-op
in the plain `read`/`write` helpers.
"""

from __future__ import annotations

import json
import math
import logging
from collections.abc import Callable
from typing import Any

from .freshness import is_fresh
from .storage.base import KeyValueStorage
from .types import (
    CacheEntry,
    CacheError,
    CacheHit,
    CacheMiss,
    CacheRead,
    CacheWrite,
    WriteError,
    WriteOk,
    now_ms,
)

logger = logging.getLogger("chainboard.cache")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_entry(raw: str) -> CacheEntry | CacheMiss:
    """Parse one serialized entry, or explain why it is unusable."""
    try:
        parsed = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        return CacheMiss("unparseable")

    if not isinstance(parsed, dict) or "value" not in parsed:
        return CacheMiss("invalid")
    timestamp = parsed.get("timestamp")
    if not _is_number(timestamp) or not math.isfinite(timestamp):
        return CacheMiss("invalid")
    version = parsed.get("version")
    if version is not None and (not isinstance(version, int) or isinstance(version, bool)):
        return CacheMiss("invalid")
    return CacheEntry(value=parsed["value"], timestamp=int(timestamp), version=version)


def encode_entry(entry: CacheEntry) -> str:
    payload: dict[str, Any] = {"value": entry.value, "timestamp": entry.timestamp}
    if entry.version is not None:
        payload["version"] = entry.version
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


class LocalCacheStore:
    """
    Key/value cache of dataset snapshots.

    Args:
        storage: Backend holding serialized entries.
        clock: Callable returning the current Unix time in milliseconds.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._storage = storage
        self._clock = clock

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def now(self) -> int:
        return self._clock()

    def write_result(self, key: str, value: Any, *, version: int | None = None) -> CacheWrite:
        """Persist `value` under `key`, stamping the write time."""
        entry = CacheEntry(value=value, timestamp=self._clock(), version=version)
        try:
            blob = encode_entry(entry)
        except (TypeError, ValueError) as e:
            logger.warning("Cache value for '%s' is not JSON serializable: %s", key, e)
            return WriteError("unserializable", e)
        try:
            self._storage.set(key, blob)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache write for '%s' dropped: %s", key, e)
            return WriteError("storage", e)
        return WriteOk(entry)

    def write(self, key: str, value: Any, *, version: int | None = None) -> None:
        self.write_result(key, value, version=version)

    def read_result(self, key: str, *, version: int | None = None) -> CacheRead:
        """
        Read the entry for `key` regardless of age.

        When `version` is given, entries whose version differs
        (a missing version counts as 0) are reported as `version_mismatch`
        misses.
        """
        try:
            raw = self._storage.get(key)
        except Exception as e:  # noqa: BLE001
            logger.debug("Cache read for '%s' failed: %s", key, e)
            return CacheError("storage", e)
        if raw is None:
            return CacheMiss("absent")

        decoded = decode_entry(raw)
        if isinstance(decoded, CacheMiss):
            logger.debug("Discarding cache entry for '%s': %s", key, decoded.reason)
            return decoded
        if version is not None and (decoded.version or 0) != version:
            return CacheMiss("version_mismatch")
        return CacheHit(decoded)

    def read_entry(self, key: str, *, version: int | None = None) -> CacheEntry | None:
        result = self.read_result(key, version=version)
        if isinstance(result, CacheHit):
            return result.entry
        return None

    def read(self, key: str, *, version: int | None = None) -> Any | None:
        """Return the cached value for `key`, ignoring age; None when absent."""
        entry = self.read_entry(key, version=version)
        return None if entry is None else entry.value

    def read_fresh_result(
        self,
        key: str,
        window_ms: int,
        *,
        version: int | None = None,
    ) -> CacheRead:
        result = self.read_result(key, version=version)
        if isinstance(result, CacheHit) and not is_fresh(result.entry, window_ms, self._clock()):
            return CacheMiss("expired")
        return result

    def read_fresh(
        self,
        key: str,
        window_ms: int,
        *,
        version: int | None = None,
    ) -> Any | None:
        """Return the cached value only while it is within `window_ms`."""
        result = self.read_fresh_result(key, window_ms, version=version)
        if isinstance(result, CacheHit):
            return result.entry.value
        return None
