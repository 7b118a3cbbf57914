"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dashboard data-layer settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .fetch.contracts import RetryPolicy


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    """Explicit settings used by data sources and the dashboard service."""

    deso_node_url: str = "https://node.deso.org/api/v0"
    deso_hodlers_url: str = "https://blockproducer.deso.org/api/v0"
    deso_graphql_url: str = "https://graphql-prod.deso.com/graphql"
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    cryptocompare_url: str = "https://min-api.cryptocompare.com/data/v2"
    cors_proxy_url: str | None = None
    mempool_url: str = "https://mempool.space/api"
    eth_rpc_url: str = "https://eth.llamarpc.com"
    sol_rpc_url: str = "https://api.mainnet-beta.solana.com"

    timeout_s: float = 15.0
    max_retries: int = 2
    backoff_base_s: float = 0.5
    backoff_jitter_s: float = 0.15
    graphql_page_size: int = 500
    graphql_max_pages: int | None = None

    @staticmethod
    def from_env() -> "DashboardSettings":
        """Load settings from environment variables."""
        max_pages = os.getenv("CHAINBOARD_GRAPHQL_MAX_PAGES")
        return DashboardSettings(
            deso_node_url=os.getenv("CHAINBOARD_DESO_NODE_URL", "https://node.deso.org/api/v0"),
            deso_hodlers_url=os.getenv(
                "CHAINBOARD_DESO_HODLERS_URL", "https://blockproducer.deso.org/api/v0"
            ),
            deso_graphql_url=os.getenv(
                "CHAINBOARD_DESO_GRAPHQL_URL", "https://graphql-prod.deso.com/graphql"
            ),
            coingecko_url=os.getenv("CHAINBOARD_COINGECKO_URL", "https://api.coingecko.com/api/v3"),
            cryptocompare_url=os.getenv(
                "CHAINBOARD_CRYPTOCOMPARE_URL", "https://min-api.cryptocompare.com/data/v2"
            ),
            cors_proxy_url=os.getenv("CHAINBOARD_CORS_PROXY_URL") or None,
            mempool_url=os.getenv("CHAINBOARD_MEMPOOL_URL", "https://mempool.space/api"),
            eth_rpc_url=os.getenv("CHAINBOARD_ETH_RPC_URL", "https://eth.llamarpc.com"),
            sol_rpc_url=os.getenv(
                "CHAINBOARD_SOL_RPC_URL", "https://api.mainnet-beta.solana.com"
            ),
            timeout_s=float(os.getenv("CHAINBOARD_HTTP_TIMEOUT_S", "15")),
            max_retries=int(os.getenv("CHAINBOARD_MAX_RETRIES", "2")),
            backoff_base_s=float(os.getenv("CHAINBOARD_BACKOFF_BASE_S", "0.5")),
            backoff_jitter_s=float(os.getenv("CHAINBOARD_BACKOFF_JITTER_S", "0.15")),
            graphql_page_size=int(os.getenv("CHAINBOARD_GRAPHQL_PAGE_SIZE", "500")),
            graphql_max_pages=int(max_pages) if max_pages else None,
        )

    def retry_policy(self) -> RetryPolicy:
        """Adapt settings into the retry policy applied to live fetches."""
        return RetryPolicy(
            max_retries=self.max_retries,
            backoff_base_s=self.backoff_base_s,
            backoff_jitter_s=self.backoff_jitter_s,
        )
