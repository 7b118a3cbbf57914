"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dataset declarations: cache key, freshness window, format version and the
checked-in static default for every dataset the dashboard renders.
"""

from __future__ import annotations

from typing import Any

from .cache.freshness import (
    AGGREGATE_WINDOW_MS,
    ANALYTICS_WINDOW_MS,
    BALANCE_WINDOW_MS,
    DAY_MS,
    NETWORK_WINDOW_MS,
    PRICE_WINDOW_MS,
    SNAPSHOT_WINDOW_MS,
)
from .fetch.contracts import DatasetConfig
from .sources.staking import has_buckets
from .sources.treasury import has_positive_holding, merge_address_rows, static_address_rows
from .sources.wallets import has_meaningful_balances, merge_wallets_with_static, static_wallet_rows

# Last-known market data shipped with the dashboard.
MARKET_DATA: dict[str, float] = {
    "deso_price": 5.78,
    "deso_total_supply": 12_200_000,
    "deso_staked": 5_730_000,
    "btc_price": 100_000,
    "eth_price": 2_640,
    "sol_price": 196,
    "focus_price": 0.00034,
    "openfund_price": 0.087,
}

EXTERNAL_TREASURY: dict[str, float] = {
    "btc_holdings": 2_100,
    "eth_hot_wallet": 1_200,
    "eth_cold_wallet": 3_800,
    "sol_cold_wallet": 45_000,
    "total_usdc": 7_000_000,
}

PRICES = "prices"
EXCHANGE_RATE = "exchange_rate"
ANALYTICS = "analytics"
NETWORK = "network"
TREASURY = "treasury"
TREASURY_ADDRESSES = "treasury_addresses"
WALLETS = "wallets"
STAKED = "staked"
BTC_HISTORY = "btc_history"
CCV1 = "ccv1"

DEFAULT_HISTORY_DAYS = 365


def _static_treasury_totals() -> dict[str, Any]:
    btc = EXTERNAL_TREASURY["btc_holdings"]
    eth = EXTERNAL_TREASURY["eth_hot_wallet"] + EXTERNAL_TREASURY["eth_cold_wallet"]
    sol = EXTERNAL_TREASURY["sol_cold_wallet"]
    return {
        "btc_satoshis": int(btc * 10**8),
        "btc": float(btc),
        "eth_wei": str(int(eth) * 10**18),
        "eth": float(eth),
        "sol_lamports": int(sol * 10**9),
        "sol": float(sol),
    }


def treasury_has_balance(totals: dict[str, Any]) -> bool:
    """An all-zero snapshot means every address lookup failed."""
    return any(float(totals.get(k) or 0) > 0 for k in ("btc", "eth", "sol"))


def history_has_points(points: list[dict[str, Any]]) -> bool:
    return len(points) > 0


def ccv1_total_is_valid(total: float) -> bool:
    return total >= 0


PRICE_SNAPSHOT: DatasetConfig[dict[str, float]] = DatasetConfig(
    key="deso-price-cache",
    window_ms=PRICE_WINDOW_MS,
    static_default={
        "deso_price": MARKET_DATA["deso_price"],
        "btc_price": MARKET_DATA["btc_price"],
        "eth_price": MARKET_DATA["eth_price"],
        "sol_price": MARKET_DATA["sol_price"],
    },
    description="USD spot prices for DESO, BTC, ETH and SOL",
)

DESO_EXCHANGE_RATE: DatasetConfig[dict[str, Any]] = DatasetConfig(
    key="deso-exchange-rate-cache",
    window_ms=PRICE_WINDOW_MS,
    static_default={
        "deso_price": MARKET_DATA["deso_price"],
        "btc_price": MARKET_DATA["btc_price"],
        "satoshis_per_deso": round(MARKET_DATA["deso_price"] / MARKET_DATA["btc_price"] * 1e8),
    },
    description="DESO/BTC exchange rate reported by the DeSo node",
)

ANALYTICS_STATS: DatasetConfig[dict[str, Any]] = DatasetConfig(
    key="analytics-stats-cache-v1",
    window_ms=ANALYTICS_WINDOW_MS,
    static_default={"total_users": None},
    description="Network-wide account counters",
)

NETWORK_STATS: DatasetConfig[dict[str, Any]] = DatasetConfig(
    key="deso-network-stats-cache",
    window_ms=NETWORK_WINDOW_MS,
    static_default={
        "block_height": None,
        "node_synced": None,
        "node_reachable": False,
        "next_block_txn_count": None,
    },
    description="Block height, node health and mempool size",
)

TREASURY_TOTALS: DatasetConfig[dict[str, Any]] = DatasetConfig(
    key="deso-treasury-totals-cache",
    window_ms=SNAPSHOT_WINDOW_MS,
    static_default=_static_treasury_totals(),
    version=2,
    accept=treasury_has_balance,
    description="External treasury holdings on BTC, ETH and SOL",
)

TREASURY_ADDRESS_ROWS: DatasetConfig[list[dict[str, Any]]] = DatasetConfig(
    key="deso-treasury-cache",
    window_ms=BALANCE_WINDOW_MS,
    static_default=static_address_rows(),
    version=2,
    accept=has_positive_holding,
    finalize=merge_address_rows,
    description="Token holdings per external treasury address",
)

WALLET_BALANCES: DatasetConfig[list[dict[str, Any]]] = DatasetConfig(
    key="deso-wallet-cache",
    window_ms=BALANCE_WINDOW_MS,
    static_default=static_wallet_rows(),
    accept=has_meaningful_balances,
    finalize=merge_wallets_with_static,
    description="DESO and DAO coin balances of tracked wallets",
)

STAKED_DESO: DatasetConfig[list[dict[str, Any]]] = DatasetConfig(
    key="deso-staked-cache",
    window_ms=BALANCE_WINDOW_MS,
    static_default=[],
    version=1,
    initial_max_age_ms=DAY_MS,
    fallback_max_age_ms=DAY_MS,
    accept=has_buckets,
    description="Staked DESO of tracked wallets grouped by validator",
)

CCV1_NETWORK_TOTAL: DatasetConfig[float] = DatasetConfig(
    key="deso-ccv1-network-total",
    window_ms=AGGREGATE_WINDOW_MS,
    static_default=0.0,
    accept=ccv1_total_is_valid,
    description="DESO locked in Creator Coins v1 across the network",
)


def btc_history_dataset(days: int = DEFAULT_HISTORY_DAYS) -> DatasetConfig[list[dict[str, Any]]]:
    """History datasets are keyed per look-back so ranges never overwrite each other."""
    if days <= 0:
        raise ValueError("days must be positive")
    return DatasetConfig(
        key=f"btc-price-history-{days}d",
        window_ms=SNAPSHOT_WINDOW_MS,
        static_default=[],
        accept=history_has_points,
        description=f"Daily BTC closes for the last {days} days",
    )


DATASETS: dict[str, DatasetConfig[Any]] = {
    PRICES: PRICE_SNAPSHOT,
    EXCHANGE_RATE: DESO_EXCHANGE_RATE,
    ANALYTICS: ANALYTICS_STATS,
    NETWORK: NETWORK_STATS,
    TREASURY: TREASURY_TOTALS,
    TREASURY_ADDRESSES: TREASURY_ADDRESS_ROWS,
    WALLETS: WALLET_BALANCES,
    STAKED: STAKED_DESO,
    BTC_HISTORY: btc_history_dataset(),
    CCV1: CCV1_NETWORK_TOTAL,
}


def get_dataset(name: str) -> DatasetConfig[Any]:
    try:
        return DATASETS[name]
    except KeyError as e:
        raise KeyError(
            f"Unknown dataset '{name}'. Available: {', '.join(sorted(DATASETS))}"
        ) from e
