"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting storage backends from environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

from .base import KeyValueStorage
from .file import FileStorage
from .inmemory import InMemoryStorage

DEFAULT_STORAGE_DIR = str(Path.home() / ".chainboard" / "cache")
DEFAULT_REDIS_PREFIX = "chainboard:cache"


def _setting(env: Mapping[str, str], name: str, default: str = "") -> str:
    return (env.get(name) or "").strip() or default


def redis_url_from_env(env: Mapping[str, str] | None = None) -> str:
    """
    Connection URL for the redis cache backend.

    `CHAINBOARD_REDIS_URL` wins when set; otherwise the URL is assembled from
    `CHAINBOARD_REDIS_HOST`, `_PORT`, `_DB` and `_PASSWORD`.
    """
    env = os.environ if env is None else env
    url = _setting(env, "CHAINBOARD_REDIS_URL")
    if url:
        return url
    host = _setting(env, "CHAINBOARD_REDIS_HOST", "localhost")
    port = _setting(env, "CHAINBOARD_REDIS_PORT", "6379")
    db = _setting(env, "CHAINBOARD_REDIS_DB", "0")
    password = _setting(env, "CHAINBOARD_REDIS_PASSWORD")
    auth = f":{quote(password, safe='')}@" if password else ""
    return f"redis://{auth}{host}:{port}/{db}"


def create_storage_from_env(*, redis_client: Any | None = None) -> KeyValueStorage:
    """
    Create a storage backend from `CHAINBOARD_STORAGE_BACKEND`.

    Backends:
    - `memory` (default)
    - `file`: one JSON file per key under `CHAINBOARD_STORAGE_DIR`
    - `redis`: keys under `CHAINBOARD_REDIS_PREFIX`, using `redis_client`
      when supplied, else a client built from `redis_url_from_env()`
    """
    backend = _setting(os.environ, "CHAINBOARD_STORAGE_BACKEND", "memory").lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryStorage()

    if backend in ("file", "files", "disk"):
        return FileStorage(_setting(os.environ, "CHAINBOARD_STORAGE_DIR", DEFAULT_STORAGE_DIR))

    if backend == "redis":
        from .redis import RedisStorage

        client = redis_client
        if client is None:
            try:
                import redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis storage backend requires `redis` to be installed."
                ) from exc
            client = redis.Redis.from_url(redis_url_from_env())

        prefix = _setting(os.environ, "CHAINBOARD_REDIS_PREFIX", DEFAULT_REDIS_PREFIX)
        return RedisStorage(client, prefix=prefix)

    raise ValueError(f"Unknown CHAINBOARD_STORAGE_BACKEND: {backend}")
