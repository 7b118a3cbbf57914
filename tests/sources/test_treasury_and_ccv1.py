from __future__ import annotations

import asyncio
import json

import pytest

from chainboard.cache import InMemoryStorage, LocalCacheStore
from chainboard.datasets import TREASURY_ADDRESS_ROWS
from chainboard.errors import AggregationPartial, TransportFailure
from chainboard.fetch import FallbackSource, fetch_with_fallback
from chainboard.sources import (
    GraphQLClient,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    TreasuryClient,
    aggregate_ccv1_network_total,
    fetch_ccv1_network_total,
    fetch_treasury_addresses,
    fetch_treasury_balances,
    merge_address_rows,
    merge_with_static,
    static_address_rows,
)
from chainboard.sources.treasury import USDC_ETH

MEMPOOL = "https://mempool.test/api"
ETH_RPC = "https://eth.test"
SOL_RPC = "https://sol.test"

FOUNDATION_BTC = "1PuXkbwqqwzEYo9SPGyAihAge3e9Lc71b"
HOT_ETH = "0x27935b18C9CeE83E07afFC3032d8524E079c201e"
AMM_SOL = "Gn7DKXMuopjmSfRyV5PAMxQPhodzVyLEFLpiPm6tcdbk"


def run_async(coro):
    return asyncio.run(coro)


def ok(payload) -> HttpResponse:
    return HttpResponse(200, json.dumps(payload).encode("utf-8"))


def rpc_result(result) -> HttpResponse:
    return ok({"jsonrpc": "2.0", "id": "1", "result": result})


class ChainSender:
    """Answers mempool lookups and ETH/SOL JSON-RPC calls for known addresses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list]] = []

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.url == f"{MEMPOOL}/address/{FOUNDATION_BTC}":
            return ok({"chain_stats": {"funded_txo_sum": 210_000_000_000, "spent_txo_sum": 10_000_000_000}})
        if request.url.startswith(MEMPOOL):
            raise TransportFailure("mempool timeout")

        body = json.loads(request.body)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))
        if method == "eth_getBalance" and params[0] == HOT_ETH:
            return rpc_result(hex(3 * 10**18))
        if method == "eth_call" and params[0]["to"] == USDC_ETH:
            return rpc_result(hex(1_500 * 10**6))
        if method == "getBalance" and params[0] == AMM_SOL:
            return rpc_result({"context": {"slot": 1}, "value": 2 * 10**9})
        if method == "getTokenAccountsByOwner":
            return rpc_result(
                {
                    "value": [
                        {"account": {"data": {"parsed": {"info": {"tokenAmount": {"uiAmount": 250.5}}}}}}
                    ]
                }
            )
        return ok({"jsonrpc": "2.0", "id": "1", "error": {"message": "unsupported"}})


def make_client(sender) -> TreasuryClient:
    return TreasuryClient(
        HttpTransport(send=sender),
        mempool_url=MEMPOOL,
        eth_rpc_url=ETH_RPC,
        sol_rpc_url=SOL_RPC,
    )


def test_treasury_totals_sum_addresses_and_zero_failures():
    totals = run_async(
        fetch_treasury_balances(
            HttpTransport(send=ChainSender()),
            mempool_url=MEMPOOL,
            eth_rpc_url=ETH_RPC,
            sol_rpc_url=SOL_RPC,
        )
    )

    assert totals == {
        "btc_satoshis": 200_000_000_000,
        "btc": 2_000.0,
        "eth_wei": str(3 * 10**18),
        "eth": 3.0,
        "sol_lamports": 2 * 10**9,
        "sol": 2.0,
    }


def test_erc20_balance_of_call_data():
    sender = ChainSender()

    amount = run_async(make_client(sender).erc20_balance(HOT_ETH, USDC_ETH, 6))

    assert amount == 1_500.0
    method, params = sender.calls[0]
    assert method == "eth_call"
    data = params[0]["data"]
    assert data.startswith("0x70a08231")
    assert data.endswith(HOT_ETH[2:].lower())
    assert len(data) == 10 + 64


def test_address_rows_include_stablecoins():
    rows = run_async(make_client(ChainSender()).fetch_address_rows())

    by_address = {row["address"]: row for row in rows}
    assert by_address[HOT_ETH]["holdings"]["ETH"] == 3.0
    assert by_address[HOT_ETH]["holdings"]["USDC"] == 1_500.0
    assert by_address[HOT_ETH]["holdings"]["USDT"] == 0.0
    assert by_address[AMM_SOL]["holdings"] == {"SOL": 2.0, "USDC": 250.5}
    assert by_address[FOUNDATION_BTC]["is_amm"] is False


def test_merge_with_static_keeps_positive_live_amounts():
    static = {row["address"]: row for row in static_address_rows()}[HOT_ETH]
    live = {**static, "holdings": {"ETH": 3.0, "USDC": 0.0, "USDT": 0.0}}

    merged = merge_with_static(live, static)

    assert merged["holdings"] == {"ETH": 3.0, "USDC": 50_000.0, "USDT": 25_000.0}


def test_merge_address_rows_matches_static_by_address():
    unknown = {
        "chain": "BTC",
        "address": "bc1unknown",
        "name": "New",
        "is_amm": False,
        "holdings": {"BTC": 1.0},
    }
    sol = {row["address"]: row for row in static_address_rows()}[AMM_SOL]
    live = [{**sol, "holdings": {"SOL": 2.0, "USDC": 0.0}}, unknown]

    merged = merge_address_rows(live)

    assert merged[0]["holdings"] == {"SOL": 2.0, "USDC": 15_600.0}
    assert merged[1] == unknown


def test_address_rows_dataset_caches_merged_live_rows():
    store = LocalCacheStore(InMemoryStorage(), clock=lambda: 1_700_000_000_000)
    transport = HttpTransport(send=ChainSender())

    async def live():
        return await fetch_treasury_addresses(
            transport, mempool_url=MEMPOOL, eth_rpc_url=ETH_RPC, sol_rpc_url=SOL_RPC
        )

    result = run_async(fetch_with_fallback(TREASURY_ADDRESS_ROWS, live, store=store))

    assert result.is_live
    by_address = {row["address"]: row for row in result.value}
    assert by_address[FOUNDATION_BTC]["holdings"] == {"BTC": 2_000.0}
    # Zero live readings fall back to the last known holdings.
    assert by_address[HOT_ETH]["holdings"]["USDT"] == 25_000.0
    assert by_address[AMM_SOL]["holdings"] == {"SOL": 2.0, "USDC": 250.5}
    assert store.read(TREASURY_ADDRESS_ROWS.key, version=2) == result.value


def test_address_rows_dataset_rejects_all_zero_snapshot():
    store = LocalCacheStore(InMemoryStorage(), clock=lambda: 1_700_000_000_000)

    async def zeros():
        rows = static_address_rows()
        return [{**row, "holdings": {k: 0.0 for k in row["holdings"]}} for row in rows]

    result = run_async(fetch_with_fallback(TREASURY_ADDRESS_ROWS, zeros, store=store))

    assert result.source is FallbackSource.STATIC
    assert result.value == static_address_rows()
    assert store.read(TREASURY_ADDRESS_ROWS.key, version=2) is None


def ccv1_sender(pages: dict[str | None, object]):
    def send(request: HttpRequest) -> HttpResponse:
        cursor = json.loads(request.body)["variables"]["after"]
        outcome = pages[cursor]
        if isinstance(outcome, Exception):
            raise outcome
        return ok({"data": {"creatorCoinBalances": outcome}})

    return send


def test_ccv1_total_walks_all_pages():
    send = ccv1_sender(
        {
            None: {
                "nodes": [{"totalValueNanos": "1000000000"}, {"totalValueNanos": 500_000_000}],
                "pageInfo": {"hasNextPage": True, "endCursor": "p2"},
            },
            "p2": {
                "nodes": [{"totalValueNanos": None}, {"totalValueNanos": 2_000_000_000}],
                "pageInfo": {"hasNextPage": False, "endCursor": None},
            },
        }
    )
    client = GraphQLClient(HttpTransport(send=send), "https://gql.test/graphql")

    total = run_async(fetch_ccv1_network_total(client, page_size=2))

    assert total == 3.5


def test_ccv1_partial_aggregation_is_reported():
    send = ccv1_sender(
        {
            None: {
                "nodes": [{"totalValueNanos": 4_000_000_000}],
                "pageInfo": {"hasNextPage": True, "endCursor": "p2"},
            },
            "p2": TransportFailure("gateway timeout"),
        }
    )
    client = GraphQLClient(HttpTransport(send=send), "https://gql.test/graphql")

    result = run_async(aggregate_ccv1_network_total(client))
    assert not result.complete
    assert result.total == 4.0

    with pytest.raises(AggregationPartial):
        run_async(fetch_ccv1_network_total(client))
