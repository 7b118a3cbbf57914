"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Thin fetch-and-parse wrappers around the remote data sources.
"""

from .analytics import fetch_analytics_stats
from .ccv1 import aggregate_ccv1_network_total, fetch_ccv1_network_total
from .graphql import GraphQLClient
from .history import fetch_btc_price_history
from .network import (
    fetch_block_height,
    fetch_network_stats,
    fetch_next_block_txn_count,
    fetch_node_health,
)
from .prices import fetch_deso_exchange_rate, fetch_live_prices
from .staking import bucket_stakes, fetch_staked_buckets, fetch_staked_deso
from .transport import HttpRequest, HttpResponse, HttpTransport, Sender, urllib_send
from .treasury import (
    TREASURY_ADDRESSES,
    TreasuryAddress,
    TreasuryClient,
    fetch_treasury_addresses,
    fetch_treasury_balances,
    merge_address_rows,
    merge_with_static,
    static_address_rows,
)
from .wallets import (
    TRACKED_WALLETS,
    TrackedWallet,
    WalletClient,
    fetch_wallet_balances,
    merge_wallets_with_static,
    static_wallet_rows,
)

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "Sender",
    "urllib_send",
    "GraphQLClient",
    "fetch_live_prices",
    "fetch_deso_exchange_rate",
    "fetch_node_health",
    "fetch_block_height",
    "fetch_next_block_txn_count",
    "fetch_network_stats",
    "fetch_analytics_stats",
    "fetch_btc_price_history",
    "aggregate_ccv1_network_total",
    "fetch_ccv1_network_total",
    "TreasuryAddress",
    "TreasuryClient",
    "fetch_treasury_balances",
    "TREASURY_ADDRESSES",
    "fetch_treasury_addresses",
    "merge_with_static",
    "merge_address_rows",
    "static_address_rows",
    "TrackedWallet",
    "TRACKED_WALLETS",
    "WalletClient",
    "fetch_wallet_balances",
    "merge_wallets_with_static",
    "static_wallet_rows",
    "bucket_stakes",
    "fetch_staked_buckets",
    "fetch_staked_deso",
]
