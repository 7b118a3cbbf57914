"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/__init__.py.
"""

from .base import KeyValueStorage
from .factory import create_storage_from_env, redis_url_from_env
from .file import FileStorage
from .inmemory import InMemoryStorage
from .redis import RedisStorage
from .registry import (
    StorageResolutionError,
    clear_storage_backends,
    create_storage,
    list_storage_backends,
    register_storage_backend,
    unregister_storage_backend,
)

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "FileStorage",
    "RedisStorage",
    "StorageResolutionError",
    "register_storage_backend",
    "unregister_storage_backend",
    "create_storage",
    "list_storage_backends",
    "clear_storage_backends",
    "create_storage_from_env",
    "redis_url_from_env",
]
