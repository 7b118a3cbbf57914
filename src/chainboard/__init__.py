"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .cache import LocalCacheStore, create_storage_from_env
from .datasets import DATASETS, get_dataset
from .errors import (
    AggregationPartial,
    ChainboardError,
    SchemaValidationFailure,
    StorageFailure,
    TransportFailure,
    classify_error,
)
from .fetch import (
    DatasetConfig,
    FallbackResult,
    FallbackSource,
    fetch_with_fallback,
    initial_value,
)
from .kpis import build_kpis
from .pagination import AggregationResult, PaginatedAggregator
from .service import DashboardService
from .settings import DashboardSettings

__all__ = [
    "LocalCacheStore",
    "create_storage_from_env",
    "DATASETS",
    "get_dataset",
    "ChainboardError",
    "TransportFailure",
    "SchemaValidationFailure",
    "StorageFailure",
    "AggregationPartial",
    "classify_error",
    "DatasetConfig",
    "FallbackResult",
    "FallbackSource",
    "fetch_with_fallback",
    "initial_value",
    "build_kpis",
    "AggregationResult",
    "PaginatedAggregator",
    "DashboardService",
    "DashboardSettings",
]
