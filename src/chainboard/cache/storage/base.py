"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/base.py.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Synchronous string key/value persistence used by the local cache store.

    Implementations may raise on any call (quota exceeded, storage disabled,
    I/O errors); the cache store absorbs those failures.
    """

    backend_id: str

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
