"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/redis.py.
"""

from __future__ import annotations

from typing import Any

from ...errors import StorageFailure
from .base import KeyValueStorage


class RedisStorage(KeyValueStorage):
    """Redis-backed storage for sharing cached snapshots across processes."""

    backend_id = "redis"

    def __init__(self, redis_client: Any, *, prefix: str = "chainboard:cache") -> None:
        self._redis = redis_client
        self._prefix = prefix.rstrip(":")

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> str | None:
        try:
            blob = self._redis.get(self._key(key))
        except Exception as e:  # noqa: BLE001
            raise StorageFailure(f"Redis GET failed for '{key}': {e}") from e
        if blob is None:
            return None
        if isinstance(blob, bytes):
            try:
                return blob.decode("utf-8")
            except UnicodeDecodeError as e:
                raise StorageFailure(f"Redis value for '{key}' is not UTF-8") from e
        return str(blob)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except Exception as e:  # noqa: BLE001
            raise StorageFailure(f"Redis SET failed for '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except Exception as e:  # noqa: BLE001
            raise StorageFailure(f"Redis DEL failed for '{key}': {e}") from e
