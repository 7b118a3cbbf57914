"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cursor-paginated numeric aggregation.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import AggregationPartial, ChainboardError, classify_error

logger = logging.getLogger("chainboard.pagination")


@dataclass(frozen=True, slots=True)
class Page:
    """
    One page of a cursor-paginated collection.

    Attributes:
        items: Rows on this page; may be empty.
        has_next: Whether another page follows.
        next_cursor: Opaque continuation token for the following page.
    """

    items: Sequence[Any]
    has_next: bool
    next_cursor: str | None = None


PageFetcher = Callable[[str | None], Awaitable[Page]]


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """
    Outcome of a paginated sum.

    `complete` is False whenever a page failed to load; `total` then holds
    only what the earlier pages contributed.
    """

    total: float
    complete: bool
    pages: int
    items: int
    error: ChainboardError | None = None

    def require_complete(self) -> float:
        """Return the total, or raise `AggregationPartial` if it is partial."""
        if not self.complete:
            raise AggregationPartial(
                f"Aggregation stopped after {self.pages} page(s): {self.error}",
                partial_total=self.total,
                pages=self.pages,
            )
        return self.total


def numeric_field(item: Any, field_name: str) -> float:
    """
    Read `field_name` from `item` as a number.

    Numeric strings are parsed; anything missing, non-numeric or non-finite
    counts as zero.
    """
    if not isinstance(item, Mapping):
        return 0.0
    raw = item.get(field_name)
    if isinstance(raw, bool) or raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(slots=True)
class PaginatedAggregator:
    """
    Sum one numeric field across every item of every page.

    Args:
        field_name: Item key holding the value to sum.
        scale: Divisor applied to the final sum (e.g. 1e9 nanos per unit).
        max_pages: Safety bound; hitting it yields an incomplete result.
    """

    field_name: str
    scale: float = 1.0
    max_pages: int | None = None

    async def aggregate(self, fetch_page: PageFetcher) -> AggregationResult:
        """Walk from the empty cursor until `has_next` is false."""
        running = 0.0
        pages = 0
        items = 0
        cursor: str | None = None
        seen: set[str] = set()

        while True:
            if self.max_pages is not None and pages >= self.max_pages:
                return self._partial(
                    running,
                    pages,
                    items,
                    ChainboardError(f"Page limit {self.max_pages} reached"),
                )
            try:
                page = await fetch_page(cursor)
            except asyncio.CancelledError:
                raise
            except Exception as e:  # noqa: BLE001
                error = classify_error(e)
                logger.warning(
                    "Page %d of '%s' aggregation failed: %s", pages + 1, self.field_name, error
                )
                return self._partial(running, pages, items, error)

            pages += 1
            for item in page.items:
                running += numeric_field(item, self.field_name)
                items += 1

            if not page.has_next:
                break
            if not page.next_cursor or page.next_cursor in seen:
                return self._partial(
                    running,
                    pages,
                    items,
                    ChainboardError(f"Invalid continuation cursor after page {pages}"),
                )
            seen.add(page.next_cursor)
            cursor = page.next_cursor

        return AggregationResult(
            total=running / self.scale,
            complete=True,
            pages=pages,
            items=items,
        )

    def _partial(
        self,
        running: float,
        pages: int,
        items: int,
        error: ChainboardError,
    ) -> AggregationResult:
        return AggregationResult(
            total=running / self.scale,
            complete=False,
            pages=pages,
            items=items,
            error=error,
        )


async def sum_paginated(
    fetch_page: PageFetcher,
    field_name: str,
    *,
    scale: float = 1.0,
    max_pages: int | None = None,
) -> AggregationResult:
    """Convenience wrapper around `PaginatedAggregator`."""
    aggregator = PaginatedAggregator(field_name, scale=scale, max_pages=max_pages)
    return await aggregator.aggregate(fetch_page)
