from __future__ import annotations

import asyncio
import json

import pytest

from chainboard.errors import SchemaValidationFailure, TransportFailure
from chainboard.sources import (
    GraphQLClient,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    fetch_analytics_stats,
    fetch_btc_price_history,
    fetch_deso_exchange_rate,
    fetch_live_prices,
    fetch_network_stats,
)

NODE = "https://node.test/api/v0"


def run_async(coro):
    return asyncio.run(coro)


class FakeSender:
    """Routes requests by URL substring to canned JSON or an exception."""

    def __init__(self, routes: dict[str, object]) -> None:
        self.routes = routes
        self.requests: list[HttpRequest] = []

    def __call__(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for fragment, outcome in self.routes.items():
            if fragment in request.url:
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, HttpResponse):
                    return outcome
                return HttpResponse(200, json.dumps(outcome).encode("utf-8"))
        raise TransportFailure(f"no route for {request.url}")


def transport_for(routes: dict[str, object]) -> tuple[HttpTransport, FakeSender]:
    sender = FakeSender(routes)
    return HttpTransport(send=sender), sender


def test_transport_maps_status_and_json_errors():
    transport, _ = transport_for(
        {
            "/teapot": HttpResponse(418, b"short and stout"),
            "/html": HttpResponse(200, b"<html>"),
        }
    )

    with pytest.raises(TransportFailure) as info:
        run_async(transport.get_json("https://x.test/teapot"))
    assert info.value.status == 418
    with pytest.raises(SchemaValidationFailure):
        run_async(transport.get_json("https://x.test/html"))


def test_transport_encodes_query_and_json_body():
    transport, sender = transport_for({"x.test": {"ok": True}})

    run_async(transport.get_json("https://x.test/a", params={"ids": "bitcoin", "skip": None}))
    run_async(transport.post_json("https://x.test/b", {"n": 1}))

    assert sender.requests[0].url == "https://x.test/a?ids=bitcoin"
    assert sender.requests[1].method == "POST"
    assert json.loads(sender.requests[1].body) == {"n": 1}
    assert sender.requests[1].headers["Content-Type"] == "application/json"


def test_json_rpc_error_is_transport_failure():
    transport, _ = transport_for({"rpc.test": {"jsonrpc": "2.0", "error": {"message": "rate limited"}}})

    with pytest.raises(TransportFailure, match="rate limited"):
        run_async(transport.json_rpc("https://rpc.test", "eth_getBalance", ["0x0", "latest"]))


def test_live_prices_accepts_either_deso_id():
    transport, _ = transport_for(
        {
            "simple/price": {
                "bitcoin": {"usd": 100_500},
                "ethereum": {"usd": 2_700},
                "solana": {"usd": 190},
                "decentralized_social": {"usd": 6.1},
            }
        }
    )

    prices = run_async(fetch_live_prices(transport, base_url="https://cg.test/api/v3"))

    assert prices == {"deso_price": 6.1, "btc_price": 100_500, "eth_price": 2_700, "sol_price": 190}


def test_live_prices_missing_deso_quote_is_zero():
    transport, _ = transport_for(
        {
            "simple/price": {
                "bitcoin": {"usd": 1},
                "ethereum": {"usd": 1},
                "solana": {"usd": 1},
            }
        }
    )

    prices = run_async(fetch_live_prices(transport, base_url="https://cg.test/api/v3"))

    assert prices["deso_price"] == 0.0


def test_live_prices_rejects_malformed_body():
    transport, _ = transport_for({"simple/price": {"bitcoin": {"usd": "lots"}}})

    with pytest.raises(SchemaValidationFailure):
        run_async(fetch_live_prices(transport, base_url="https://cg.test/api/v3"))


def test_exchange_rate_converts_cents():
    transport, _ = transport_for(
        {
            "get-exchange-rate": {
                "USDCentsPerDeSoExchangeRate": 578,
                "SatoshisPerDeSoExchangeRate": 5780,
                "USDCentsPerBitcoinExchangeRate": 10_000_000,
            }
        }
    )

    rate = run_async(fetch_deso_exchange_rate(transport, node_url=NODE))

    assert rate == {"deso_price": 5.78, "btc_price": 100_000, "satoshis_per_deso": 5780}


def test_network_stats_tolerates_partial_failures():
    transport, _ = transport_for(
        {
            "health-check": HttpResponse(503, b""),
            "get-app-state": {"BlockHeight": 123_456},
            "get-block-template": TransportFailure("timeout"),
        }
    )

    stats = run_async(fetch_network_stats(transport, node_url=NODE))

    assert stats == {
        "block_height": 123_456,
        "node_synced": False,
        "node_reachable": True,
        "next_block_txn_count": None,
    }


def test_network_stats_raises_when_node_unreachable():
    transport, _ = transport_for({})

    with pytest.raises(TransportFailure):
        run_async(fetch_network_stats(transport, node_url=NODE))


def test_analytics_reads_total_count():
    transport, sender = transport_for(
        {"graphql": {"data": {"accounts": {"totalCount": 2_500_000, "nodes": []}}}}
    )
    client = GraphQLClient(transport, "https://gql.test/graphql")

    stats = run_async(fetch_analytics_stats(client))

    assert stats == {"total_users": 2_500_000}
    assert "accounts(first: 1)" in json.loads(sender.requests[0].body)["query"]


def test_graphql_errors_raise_schema_failure():
    transport, _ = transport_for({"graphql": {"errors": [{"message": "boom"}]}})
    client = GraphQLClient(transport, "https://gql.test/graphql")

    with pytest.raises(SchemaValidationFailure, match="boom"):
        run_async(fetch_analytics_stats(client))


def test_btc_history_sorted_and_filtered():
    transport, sender = transport_for(
        {
            "histoday": {
                "Response": "Success",
                "Data": {
                    "Data": [
                        {"time": 1_700_086_400, "close": 37_000.0},
                        {"time": 1_700_000_000, "close": 36_500.0},
                        {"time": 1_700_172_800, "close": 0},
                    ]
                },
            }
        }
    )

    history = run_async(
        fetch_btc_price_history(
            transport,
            2,
            base_url="https://cc.test/data/v2",
            proxy_url="https://proxy.test/?quest=",
        )
    )

    assert history == [
        {"date": "2023-11-14", "price": 36_500.0},
        {"date": "2023-11-15", "price": 37_000.0},
    ]
    assert sender.requests[0].url.startswith("https://proxy.test/?quest=https%3A%2F%2Fcc.test")


def test_btc_history_error_response():
    transport, _ = transport_for({"histoday": {"Response": "Error", "Message": "rate limit"}})

    with pytest.raises(SchemaValidationFailure):
        run_async(fetch_btc_price_history(transport, 30, base_url="https://cc.test/data/v2"))
    with pytest.raises(ValueError):
        run_async(fetch_btc_price_history(transport, 0, base_url="https://cc.test/data/v2"))
