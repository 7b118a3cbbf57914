"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Network-wide analytics counters from the DeSo GraphQL API.
"""

from __future__ import annotations

from typing import Any

from .graphql import GraphQLClient

ACCOUNTS_TOTAL_QUERY = """
query AccountsTotal {
  accounts(first: 1) {
    totalCount
    pageInfo { hasNextPage }
  }
}
"""


async def fetch_analytics_stats(client: GraphQLClient) -> dict[str, Any]:
    """Total user accounts, or None when the endpoint does not expose a count."""
    conn = await client.connection(ACCOUNTS_TOTAL_QUERY, "accounts")
    total = conn.totalCount if conn.totalCount is not None and conn.totalCount >= 0 else None
    return {"total_users": total}
