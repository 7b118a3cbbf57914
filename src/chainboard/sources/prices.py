"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Spot prices from CoinGecko and the DeSo node exchange rate.
"""

from __future__ import annotations

from typing import Any

from .schemas import CoinGeckoSimplePrice, DesoExchangeRate, parse_model
from .transport import HttpTransport

COINGECKO_IDS = ("bitcoin", "ethereum", "solana", "decentralized-social")


async def fetch_live_prices(transport: HttpTransport, *, base_url: str) -> dict[str, float]:
    """
    USD spot prices for DESO, BTC, ETH and SOL.

    CoinGecko has served the DESO quote under both `decentralized-social` and
    `decentralized_social`; a missing quote yields 0.
    """
    url = f"{base_url.rstrip('/')}/simple/price"
    raw = await transport.get_json(
        url, params={"ids": ",".join(COINGECKO_IDS), "vs_currencies": "usd"}
    )
    data = parse_model(CoinGeckoSimplePrice, raw, source=url)
    deso = data.deso_dashed or data.deso_underscored
    return {
        "deso_price": deso.usd if deso is not None else 0.0,
        "btc_price": data.bitcoin.usd,
        "eth_price": data.ethereum.usd,
        "sol_price": data.solana.usd,
    }


async def fetch_deso_exchange_rate(transport: HttpTransport, *, node_url: str) -> dict[str, Any]:
    """DESO and BTC USD prices as reported by the DeSo node."""
    url = f"{node_url.rstrip('/')}/get-exchange-rate"
    raw = await transport.post_json(url, {})
    data = parse_model(DesoExchangeRate, raw, source=url)
    return {
        "deso_price": data.USDCentsPerDeSoExchangeRate / 100,
        "btc_price": data.USDCentsPerBitcoinExchangeRate / 100,
        "satoshis_per_deso": data.SatoshisPerDeSoExchangeRate,
    }
