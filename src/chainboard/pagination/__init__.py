"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cursor-paginated numeric aggregation.
"""

from .aggregator import (
    AggregationResult,
    Page,
    PageFetcher,
    PaginatedAggregator,
    numeric_field,
    sum_paginated,
)

__all__ = [
    "Page",
    "PageFetcher",
    "AggregationResult",
    "PaginatedAggregator",
    "numeric_field",
    "sum_paginated",
]
