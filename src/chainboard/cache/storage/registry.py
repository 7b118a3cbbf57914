"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Process-wide registry of named storage backends.

Several dashboards in one process can share a backend by id instead of each
opening its own file directory or Redis connection.
"""

from __future__ import annotations

from threading import Lock

from ...errors import ChainboardError
from .base import KeyValueStorage
from .inmemory import InMemoryStorage

DEFAULT_BACKEND_ID = "memory"

_REGISTRY: dict[str, KeyValueStorage] = {}
_LOCK = Lock()


class StorageResolutionError(ChainboardError):
    """Raised when a storage backend id cannot be registered or resolved."""


def _normalize(backend_id: str) -> str:
    key = backend_id.strip().lower()
    if not key:
        raise StorageResolutionError("Storage backend id must be non-empty")
    return key


def register_storage_backend(
    backend: KeyValueStorage,
    *,
    overwrite: bool = False,
) -> None:
    """Register `backend` under its `backend_id`."""
    key = _normalize(backend.backend_id)
    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise StorageResolutionError(f"Storage backend already registered: {key}")
        _REGISTRY[key] = backend


def unregister_storage_backend(backend_id: str) -> KeyValueStorage | None:
    """Remove and return the backend registered under `backend_id`, if any."""
    with _LOCK:
        return _REGISTRY.pop(_normalize(backend_id), None)


def create_storage(backend: str | KeyValueStorage | None = None) -> KeyValueStorage:
    """
    Resolve a storage backend.

    - None: the shared in-memory backend, created on first use.
    - A backend instance: returned unchanged.
    - An id: the registered backend with that id.
    """
    if backend is not None and not isinstance(backend, str):
        return backend

    key = _normalize(backend or DEFAULT_BACKEND_ID)
    with _LOCK:
        resolved = _REGISTRY.get(key)
        if resolved is None and key == DEFAULT_BACKEND_ID:
            resolved = InMemoryStorage(backend_id=DEFAULT_BACKEND_ID)
            _REGISTRY[key] = resolved
    if resolved is None:
        raise StorageResolutionError(
            f"Unknown storage backend '{backend}'. Registered: {', '.join(sorted(_REGISTRY)) or 'none'}"
        )
    return resolved


def list_storage_backends() -> list[str]:
    with _LOCK:
        return sorted(_REGISTRY)


def clear_storage_backends() -> None:
    """Drop every registered backend. Intended for tests."""
    with _LOCK:
        _REGISTRY.clear()
