"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/inmemory.py.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import StorageFailure
from .base import KeyValueStorage


@dataclass(slots=True)
class InMemoryStorage(KeyValueStorage):
    """
    Process-local storage suitable for development/test workloads.

    `max_bytes` emulates a storage quota: a write that would push the total
    size of stored values past it raises `StorageFailure`.
    """

    backend_id: str = "memory"
    max_bytes: int | None = None

    def __post_init__(self) -> None:
        self._rows: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._rows.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            used = sum(len(v) for k, v in self._rows.items() if k != key)
            if used + len(value) > self.max_bytes:
                raise StorageFailure(f"Storage quota exceeded writing '{key}'")
        self._rows[key] = value

    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._rows)
