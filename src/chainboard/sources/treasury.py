"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

External treasury balances on Bitcoin, Ethereum and Solana.

Per-address failures contribute zero to totals rather than failing the
whole snapshot; the dataset's acceptance check treats an all-zero result as
a failed fetch so cached or static holdings are shown instead.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Literal

from ..errors import ChainboardError
from .schemas import MempoolAddress, SolBalance, parse_model
from .transport import HttpTransport

logger = logging.getLogger("chainboard.sources.treasury")

SATOSHI_PER_BTC = 1e8
WEI_PER_ETH = 1e18
LAMPORTS_PER_SOL = 1e9
STABLECOIN_DECIMALS = 6

USDC_ETH = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDT_ETH = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
USDC_SOL_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
ERC20_BALANCE_OF = "0x70a08231"

Chain = Literal["BTC", "ETH", "SOL"]


@dataclass(frozen=True, slots=True)
class TreasuryAddress:
    chain: Chain
    address: str
    name: str
    is_amm: bool


TREASURY_ADDRESSES: tuple[TreasuryAddress, ...] = (
    TreasuryAddress("BTC", "1PuXkbwqqwzEYo9SPGyAihAge3e9Lc71b", "Cold Wallet (Foundation)", False),
    TreasuryAddress("BTC", "bc1q9hzvw580rwjf5uvqenjjslvu7nytlkskq75gj5", "Cold Wallet (AMM)", True),
    TreasuryAddress("BTC", "1ARhoSeAjs8acMT7wxgKTzpST3Yyd2oizd", "Hot Wallet (AMM)", True),
    TreasuryAddress("ETH", "0x27935b18C9CeE83E07afFC3032d8524E079c201e", "Hot Wallet", False),
    TreasuryAddress("ETH", "0x9Fc97be2e0E44aC2c65742e1F2f4a8F8baBD56E6", "Cold Wallet", False),
    TreasuryAddress("SOL", "Gn7DKXMuopjmSfRyV5PAMxQPhodzVyLEFLpiPm6tcdbk", "Hot Wallet (AMM)", True),
)

# Last known holdings per address, used when an address reads as zero.
STATIC_HOLDINGS: dict[str, dict[str, float]] = {
    "1PuXkbwqqwzEYo9SPGyAihAge3e9Lc71b": {"BTC": 2100.0},
    "bc1q9hzvw580rwjf5uvqenjjslvu7nytlkskq75gj5": {"BTC": 0.0},
    "1ARhoSeAjs8acMT7wxgKTzpST3Yyd2oizd": {"BTC": 0.0},
    "0x27935b18C9CeE83E07afFC3032d8524E079c201e": {"ETH": 9.5, "USDC": 50000.0, "USDT": 25000.0},
    "0x9Fc97be2e0E44aC2c65742e1F2f4a8F8baBD56E6": {"ETH": 0.76, "USDC": 16000.0, "USDT": 100.0},
    "Gn7DKXMuopjmSfRyV5PAMxQPhodzVyLEFLpiPm6tcdbk": {"SOL": 0.0, "USDC": 15600.0},
}


def static_address_rows() -> list[dict[str, Any]]:
    return [
        {
            "chain": cfg.chain,
            "address": cfg.address,
            "name": cfg.name,
            "is_amm": cfg.is_amm,
            "holdings": dict(STATIC_HOLDINGS.get(cfg.address, {})),
        }
        for cfg in TREASURY_ADDRESSES
    ]


def _hex_to_int(value: Any) -> int:
    if not isinstance(value, str) or not value:
        return 0
    try:
        return int(value, 16)
    except ValueError:
        return 0


class TreasuryClient:
    """Balance lookups against mempool.space and public ETH/SOL RPC nodes."""

    def __init__(
        self,
        transport: HttpTransport,
        *,
        mempool_url: str,
        eth_rpc_url: str,
        sol_rpc_url: str,
        addresses: tuple[TreasuryAddress, ...] = TREASURY_ADDRESSES,
    ) -> None:
        self._transport = transport
        self._mempool_url = mempool_url.rstrip("/")
        self._eth_rpc_url = eth_rpc_url
        self._sol_rpc_url = sol_rpc_url
        self._addresses = addresses

    def _of_chain(self, chain: Chain) -> list[str]:
        return [a.address for a in self._addresses if a.chain == chain]

    async def btc_satoshis(self, address: str) -> int:
        url = f"{self._mempool_url}/address/{address}"
        try:
            raw = await self._transport.get_json(url)
            stats = parse_model(MempoolAddress, raw, source=url).chain_stats
        except ChainboardError as e:
            logger.debug("BTC balance for %s unavailable: %s", address, e)
            return 0
        return stats.funded_txo_sum - stats.spent_txo_sum

    async def eth_wei(self, address: str) -> int:
        try:
            result = await self._transport.json_rpc(
                self._eth_rpc_url, "eth_getBalance", [address, "latest"]
            )
        except ChainboardError as e:
            logger.debug("ETH balance for %s unavailable: %s", address, e)
            return 0
        return _hex_to_int(result)

    async def erc20_balance(self, address: str, token: str, decimals: int) -> float:
        data = ERC20_BALANCE_OF + address.lower().removeprefix("0x").rjust(64, "0")
        try:
            result = await self._transport.json_rpc(
                self._eth_rpc_url, "eth_call", [{"to": token, "data": data}, "latest"]
            )
        except ChainboardError as e:
            logger.debug("ERC-20 %s balance for %s unavailable: %s", token, address, e)
            return 0.0
        return _hex_to_int(result) / 10**decimals

    async def sol_lamports(self, address: str) -> int:
        try:
            result = await self._transport.json_rpc(self._sol_rpc_url, "getBalance", [address])
            return parse_model(SolBalance, result, source="solana getBalance").value
        except ChainboardError as e:
            logger.debug("SOL balance for %s unavailable: %s", address, e)
            return 0

    async def sol_usdc(self, address: str) -> float:
        try:
            result = await self._transport.json_rpc(
                self._sol_rpc_url,
                "getTokenAccountsByOwner",
                [address, {"mint": USDC_SOL_MINT}, {"encoding": "jsonParsed"}],
            )
        except ChainboardError as e:
            logger.debug("SOL USDC balance for %s unavailable: %s", address, e)
            return 0.0
        total = 0.0
        accounts = result.get("value") if isinstance(result, dict) else None
        for account in accounts or []:
            try:
                amount = account["account"]["data"]["parsed"]["info"]["tokenAmount"]["uiAmount"]
            except (KeyError, TypeError):
                continue
            if isinstance(amount, (int, float)) and not isinstance(amount, bool):
                total += float(amount)
        return total

    async def fetch_totals(self) -> dict[str, Any]:
        """Summed native balances across all tracked addresses."""
        btc, eth, sol = await asyncio.gather(
            asyncio.gather(*(self.btc_satoshis(a) for a in self._of_chain("BTC"))),
            asyncio.gather(*(self.eth_wei(a) for a in self._of_chain("ETH"))),
            asyncio.gather(*(self.sol_lamports(a) for a in self._of_chain("SOL"))),
        )
        satoshis = sum(btc)
        wei = sum(eth)
        lamports = sum(sol)
        return {
            "btc_satoshis": satoshis,
            "btc": satoshis / SATOSHI_PER_BTC,
            "eth_wei": str(wei),
            "eth": wei / WEI_PER_ETH,
            "sol_lamports": lamports,
            "sol": lamports / LAMPORTS_PER_SOL,
        }

    async def _holdings(self, cfg: TreasuryAddress) -> dict[str, float]:
        if cfg.chain == "BTC":
            return {"BTC": await self.btc_satoshis(cfg.address) / SATOSHI_PER_BTC}
        if cfg.chain == "ETH":
            wei, usdc, usdt = await asyncio.gather(
                self.eth_wei(cfg.address),
                self.erc20_balance(cfg.address, USDC_ETH, STABLECOIN_DECIMALS),
                self.erc20_balance(cfg.address, USDT_ETH, STABLECOIN_DECIMALS),
            )
            return {"ETH": wei / WEI_PER_ETH, "USDC": usdc, "USDT": usdt}
        lamports, usdc = await asyncio.gather(
            self.sol_lamports(cfg.address), self.sol_usdc(cfg.address)
        )
        return {"SOL": lamports / LAMPORTS_PER_SOL, "USDC": usdc}

    async def fetch_address_rows(self) -> list[dict[str, Any]]:
        """One row per tracked address with its token holdings."""
        holdings = await asyncio.gather(*(self._holdings(cfg) for cfg in self._addresses))
        return [
            {
                "chain": cfg.chain,
                "address": cfg.address,
                "name": cfg.name,
                "is_amm": cfg.is_amm,
                "holdings": held,
            }
            for cfg, held in zip(self._addresses, holdings)
        ]


def merge_with_static(row: dict[str, Any], static_row: dict[str, Any]) -> dict[str, Any]:
    """Per token, keep the live amount when positive, else the static one."""
    live = row.get("holdings") or {}
    fallback = static_row.get("holdings") or {}
    merged = {
        token: (live.get(token, 0) if live.get(token, 0) > 0 else fallback.get(token, 0))
        for token in {*live, *fallback}
    }
    return {**static_row, **row, "holdings": merged}


def merge_address_rows(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Merge each live row with the static row for the same address."""
    static_by_address = {r["address"]: r for r in static_address_rows()}
    return [
        merge_with_static(row, static_by_address[row["address"]])
        if row.get("address") in static_by_address
        else row
        for row in rows
    ]


def has_positive_holding(rows: list[dict[str, Any]]) -> bool:
    return any(
        amount > 0
        for row in rows
        for amount in (row.get("holdings") or {}).values()
        if isinstance(amount, (int, float))
    )


async def fetch_treasury_balances(
    transport: HttpTransport,
    *,
    mempool_url: str,
    eth_rpc_url: str,
    sol_rpc_url: str,
) -> dict[str, Any]:
    """Native BTC/ETH/SOL totals across every tracked treasury address."""
    client = TreasuryClient(
        transport,
        mempool_url=mempool_url,
        eth_rpc_url=eth_rpc_url,
        sol_rpc_url=sol_rpc_url,
    )
    return await client.fetch_totals()


async def fetch_treasury_addresses(
    transport: HttpTransport,
    *,
    mempool_url: str,
    eth_rpc_url: str,
    sol_rpc_url: str,
) -> list[dict[str, Any]]:
    """Token holdings of every tracked treasury address."""
    client = TreasuryClient(
        transport,
        mempool_url=mempool_url,
        eth_rpc_url=eth_rpc_url,
        sol_rpc_url=sol_rpc_url,
    )
    return await client.fetch_address_rows()
