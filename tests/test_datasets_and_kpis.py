from __future__ import annotations

import pytest

from chainboard.datasets import (
    DATASETS,
    STAKED_DESO,
    TREASURY_ADDRESS_ROWS,
    TREASURY_TOTALS,
    WALLET_BALANCES,
    btc_history_dataset,
    get_dataset,
    treasury_has_balance,
)
from chainboard.kpis import build_kpis


def test_every_dataset_has_unique_key_and_static_default():
    keys = [config.key for config in DATASETS.values()]

    assert len(keys) == len(set(keys))
    for config in DATASETS.values():
        assert config.static_default is not None


def test_treasury_dataset_is_versioned_with_static_holdings():
    assert TREASURY_TOTALS.key == "deso-treasury-totals-cache"
    assert TREASURY_TOTALS.version == 2
    static = TREASURY_TOTALS.default()
    assert static["btc"] == 2_100
    assert static["eth"] == 5_000
    assert static["sol"] == 45_000
    assert static["eth_wei"] == str(5_000 * 10**18)


def test_balance_datasets_keep_their_cache_formats():
    assert TREASURY_ADDRESS_ROWS.key == "deso-treasury-cache"
    assert TREASURY_ADDRESS_ROWS.version == 2
    assert len(TREASURY_ADDRESS_ROWS.default()) == 6
    assert not TREASURY_ADDRESS_ROWS.accept([{"holdings": {"BTC": 0.0}}])

    assert WALLET_BALANCES.key == "deso-wallet-cache"
    assert WALLET_BALANCES.version is None
    names = {row["name"] for row in WALLET_BALANCES.default()}
    assert {"Gringotts_Wizarding_Bank", "Randhir (Me)"} <= names
    assert not WALLET_BALANCES.accept([{"name": "Nader", "balances": {}}])

    assert STAKED_DESO.key == "deso-staked-cache"
    assert STAKED_DESO.version == 1
    assert STAKED_DESO.initial_max_age_ms == 24 * 60 * 60 * 1000
    assert STAKED_DESO.fallback_max_age_ms == 24 * 60 * 60 * 1000
    assert STAKED_DESO.default() == []
    assert not STAKED_DESO.accept([])


def test_treasury_acceptance_rejects_all_zero_snapshot():
    assert not treasury_has_balance({"btc": 0, "eth": 0.0, "sol": 0})
    assert treasury_has_balance({"btc": 0, "eth": 0.1, "sol": 0})


def test_history_datasets_are_keyed_by_range():
    assert btc_history_dataset(30).key != btc_history_dataset(365).key
    assert btc_history_dataset(30).default() == []
    with pytest.raises(ValueError):
        btc_history_dataset(0)


def test_unknown_dataset_lists_available_names():
    with pytest.raises(KeyError, match="prices"):
        get_dataset("weather")


def test_kpis_from_live_values():
    kpis = build_kpis(
        {"deso_price": 10.0, "btc_price": 50_000, "eth_price": 2_000, "sol_price": 100},
        {"btc": 2, "eth": 10, "sol": 100},
        total_supply=1_000_000,
        staked=250_000,
        usdc_holdings=0,
    )

    assert kpis["market_cap"] == 10_000_000
    assert kpis["btc_treasury_value"] == 100_000
    assert kpis["treasury_value"] == 100_000 + 20_000 + 10_000
    assert kpis["treasury_coverage"] == pytest.approx(0.013)
    assert kpis["staked_ratio"] == 0.25


def test_kpis_never_use_zero_prices():
    kpis = build_kpis({"deso_price": 0, "btc_price": None}, {"btc": 1})

    assert kpis["deso_price"] == 5.78
    assert kpis["btc_treasury_value"] == 100_000
    assert kpis["market_cap"] == pytest.approx(5.78 * 12_200_000)
