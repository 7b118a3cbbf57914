"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy shared by transports, cache storage and aggregators.
"""

from __future__ import annotations

import asyncio
import json
import socket

from pydantic import ValidationError


class ChainboardError(RuntimeError):
    """Base error for the chainboard data layer."""


class TransportFailure(ChainboardError):
    """Raised on network errors, timeouts and non-success HTTP responses."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SchemaValidationFailure(ChainboardError):
    """Raised when a response body does not have the expected shape."""


class StorageFailure(ChainboardError):
    """Raised by storage backends when a read or write cannot be performed."""


class AggregationPartial(ChainboardError):
    """
    Raised when a paginated aggregation stopped before its last page.

    Attributes:
        partial_total: Sum accumulated from the pages that did load.
        pages: Number of pages consumed before the abort.
    """

    def __init__(self, message: str, *, partial_total: float, pages: int) -> None:
        super().__init__(message)
        self.partial_total = partial_total
        self.pages = pages


def classify_error(error: BaseException) -> ChainboardError:
    """Map arbitrary exceptions from a live fetch into the chainboard taxonomy."""
    if isinstance(error, ChainboardError):
        return error
    if isinstance(error, (asyncio.TimeoutError, TimeoutError, socket.timeout)):
        return TransportFailure(f"timeout: {error}")
    if isinstance(error, (ConnectionError, OSError)):
        return TransportFailure(str(error))
    if isinstance(error, (ValidationError, json.JSONDecodeError, KeyError, TypeError)):
        return SchemaValidationFailure(str(error))
    return ChainboardError(str(error))
