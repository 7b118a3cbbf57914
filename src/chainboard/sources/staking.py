"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Staked DESO of the tracked wallets, bucketed by validator.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from .transport import HttpTransport
from .wallets import NANOS_PER_DESO, WalletClient, run_batched, stake_nanos

logger = logging.getLogger("chainboard.sources.staking")

ValidatorType = Literal["core", "community"]

# Foundation-run validators; every other validator counts as community.
CORE_VALIDATOR_USERNAMES: frozenset[str] = frozenset(
    {
        "LazyNina",
        "NOT_AN_AGI",
        "STAKE_TO_ME_OR_ELSE",
        "REVOLUTIONARY_STAKING",
        "simple_man_staking",
        "respect_for_yield",
        "AmericanStakers",
        "UtopianCondition",
        "yumyumstake",
        "DesoSpaceStation",
        "SAFU_Stake",
    }
)

FOUNDATION_CLASSES = frozenset({"FOUNDATION", "AMM", "FOUNDER"})


def validator_type(name: str | None) -> ValidatorType:
    return "core" if name in CORE_VALIDATOR_USERNAMES else "community"


def bucket_stakes(
    rows: list[dict[str, Any]],
    validator_names: dict[str, str | None],
) -> list[dict[str, Any]]:
    """
    Group stake rows by validator, largest bucket first.

    Rows from foundation, AMM and founder wallets land in `foundation`;
    everything else in `community`. Validators without a profile are shown
    by public key.
    """
    buckets: dict[str, dict[str, Any]] = {}
    for row in rows:
        validator_pk = row["validator_pk"]
        bucket = buckets.get(validator_pk)
        if bucket is None:
            name = validator_names.get(validator_pk)
            bucket = {
                "validator_key": validator_pk,
                "validator_name": name or validator_pk,
                "validator_type": validator_type(name),
                "foundation": [],
                "community": [],
                "total": 0.0,
            }
            buckets[validator_pk] = bucket
        side = "foundation" if row["classification"] in FOUNDATION_CLASSES else "community"
        bucket[side].append(row)
        bucket["total"] += row["amount"]
    return sorted(buckets.values(), key=lambda b: b["total"], reverse=True)


def has_buckets(buckets: list[dict[str, Any]]) -> bool:
    return len(buckets) > 0


async def fetch_staked_buckets(client: WalletClient) -> list[dict[str, Any]]:
    """Stake entries of every resolved wallet, grouped by validator."""
    tracked = await client.resolve_wallets()
    public_keys = list(tracked)
    entries = await run_batched(public_keys, client.stake_entries)

    rows: list[dict[str, Any]] = []
    for pk, stakes in zip(public_keys, entries):
        wallet = tracked[pk]
        for entry in stakes:
            amount = stake_nanos(entry) / NANOS_PER_DESO
            if amount <= 0 or not entry.ValidatorPublicKeyBase58Check:
                continue
            rows.append(
                {
                    "staker_pk": pk,
                    "staker_name": wallet.name,
                    "validator_pk": entry.ValidatorPublicKeyBase58Check,
                    "classification": wallet.classification,
                    "amount": amount,
                }
            )

    validator_pks = sorted({row["validator_pk"] for row in rows})
    names = await run_batched(validator_pks, client.username_for)
    logger.debug("Bucketed %d stakes across %d validators", len(rows), len(validator_pks))
    return bucket_stakes(rows, dict(zip(validator_pks, names)))


async def fetch_staked_deso(
    transport: HttpTransport,
    *,
    node_url: str,
    hodlers_url: str,
) -> list[dict[str, Any]]:
    client = WalletClient(transport, node_url=node_url, hodlers_url=hodlers_url)
    return await fetch_staked_buckets(client)
