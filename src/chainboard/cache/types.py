"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache entry model and the typed results produced by store reads and writes.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Generic, Literal, TypeAlias, TypeVar

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]

T = TypeVar("T")

MissReason = Literal["absent", "unparseable", "invalid", "version_mismatch", "expired"]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """
    One persisted dataset snapshot.

    Attributes:
        value: JSON-compatible payload as returned by the live fetch.
        timestamp: Unix milliseconds when the store wrote the entry.
        version: Format version tag written alongside the value, if any.
    """

    value: T
    timestamp: int
    version: int | None = None


@dataclass(frozen=True, slots=True)
class CacheHit(Generic[T]):
    """Read produced a structurally valid entry."""

    entry: CacheEntry[T]
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class CacheMiss:
    """Read found nothing usable. `reason` says why."""

    reason: MissReason
    ok: Literal[False] = False


@dataclass(frozen=True, slots=True)
class CacheError:
    """Storage backend raised while reading; treated as a miss by callers."""

    reason: str
    error: BaseException | None = None
    ok: Literal[False] = False


CacheRead: TypeAlias = CacheHit | CacheMiss | CacheError


@dataclass(frozen=True, slots=True)
class WriteOk:
    """Entry persisted."""

    entry: CacheEntry
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class WriteError:
    """Entry could not be serialized or persisted; the write was dropped."""

    reason: str
    error: BaseException | None = None
    ok: Literal[False] = False


CacheWrite: TypeAlias = WriteOk | WriteError
