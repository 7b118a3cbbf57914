"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Network-wide DESO locked in Creator Coins v1.
"""

from __future__ import annotations

from ..pagination import AggregationResult, PaginatedAggregator
from .graphql import GraphQLClient

NANOS_PER_DESO = 1e9

CREATOR_COIN_BALANCES_QUERY = """
query CreatorCoinBalances($first: Int, $after: Cursor) {
  creatorCoinBalances(first: $first, after: $after) {
    nodes { totalValueNanos }
    pageInfo { hasNextPage endCursor }
  }
}
"""


async def aggregate_ccv1_network_total(
    client: GraphQLClient,
    *,
    page_size: int = 500,
    max_pages: int | None = None,
) -> AggregationResult:
    """Sum `totalValueNanos` over every creator coin balance, in DESO."""
    fetch_page = client.page_fetcher(
        CREATOR_COIN_BALANCES_QUERY, "creatorCoinBalances", page_size=page_size
    )
    aggregator = PaginatedAggregator(
        "totalValueNanos", scale=NANOS_PER_DESO, max_pages=max_pages
    )
    return await aggregator.aggregate(fetch_page)


async def fetch_ccv1_network_total(
    client: GraphQLClient,
    *,
    page_size: int = 500,
    max_pages: int | None = None,
) -> float:
    """Complete CCv1 total in DESO; raises `AggregationPartial` otherwise."""
    result = await aggregate_ccv1_network_total(
        client, page_size=page_size, max_pages=max_pages
    )
    return result.require_complete()
