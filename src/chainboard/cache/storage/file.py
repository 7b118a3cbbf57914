"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/file.py.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from ...errors import StorageFailure
from .base import KeyValueStorage


class FileStorage(KeyValueStorage):
    """
    Durable storage keeping one JSON document per key inside a directory.

    File names are the SHA-256 of the key so arbitrary key strings are safe.
    Writes go to a temporary sibling first and are moved into place, so a
    crash mid-write leaves the previous value readable.
    """

    backend_id = "file"

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageFailure(f"Failed reading cache file for '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise StorageFailure(f"Failed writing cache file for '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageFailure(f"Failed deleting cache file for '{key}': {e}") from e
