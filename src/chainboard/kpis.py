"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Headline figures derived from the price and treasury datasets.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .datasets import EXTERNAL_TREASURY, MARKET_DATA


def _positive(source: Mapping[str, Any], key: str, fallback: float) -> float:
    value = source.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return float(fallback)
    return float(value)


def build_kpis(
    prices: Mapping[str, Any],
    treasury: Mapping[str, Any],
    *,
    total_supply: float | None = None,
    staked: float | None = None,
    usdc_holdings: float | None = None,
) -> dict[str, float]:
    """
    Market cap, treasury value and coverage.

    Any price that is missing or not positive is replaced by the checked-in
    market value, so a failed quote never renders as a zero valuation.
    """
    deso_price = _positive(prices, "deso_price", MARKET_DATA["deso_price"])
    btc_price = _positive(prices, "btc_price", MARKET_DATA["btc_price"])
    eth_price = _positive(prices, "eth_price", MARKET_DATA["eth_price"])
    sol_price = _positive(prices, "sol_price", MARKET_DATA["sol_price"])

    supply = total_supply if total_supply is not None else MARKET_DATA["deso_total_supply"]
    staked_deso = staked if staked is not None else MARKET_DATA["deso_staked"]
    usdc = usdc_holdings if usdc_holdings is not None else EXTERNAL_TREASURY["total_usdc"]

    btc_value = float(treasury.get("btc") or 0) * btc_price
    eth_value = float(treasury.get("eth") or 0) * eth_price
    sol_value = float(treasury.get("sol") or 0) * sol_price
    treasury_value = btc_value + eth_value + sol_value + usdc

    market_cap = deso_price * supply
    return {
        "deso_price": deso_price,
        "market_cap": market_cap,
        "staked_value": deso_price * staked_deso,
        "staked_ratio": staked_deso / supply if supply > 0 else 0.0,
        "btc_treasury_value": btc_value,
        "eth_treasury_value": eth_value,
        "sol_treasury_value": sol_value,
        "treasury_value": treasury_value,
        "treasury_coverage": treasury_value / market_cap if market_cap > 0 else 0.0,
    }
