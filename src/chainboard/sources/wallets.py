"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Tracked DeSo wallet balances: DESO (spendable plus staked) and DAO coin
holdings for foundation, AMM, founder and community accounts.

DAO coin balances come from walking each token's holder list, which is
sorted by balance, and stopping once a page's smallest holding is worth
less than `MIN_HOLDING_USD`. Individual lookups that fail count as zero
holdings; the wallet dataset rejects an all-zero snapshot so cached or
static balances are shown instead.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

from ..errors import ChainboardError
from .schemas import (
    Hodler,
    HodlersPage,
    SingleProfile,
    StakeEntries,
    StakeEntry,
    UserBalance,
    UsersStateless,
    parse_model,
)
from .transport import HttpTransport

logger = logging.getLogger("chainboard.sources.wallets")

NANOS_PER_DESO = 1e9
NANOS_PER_DAO_COIN = 1e18
HODLERS_PAGE_SIZE = 200
MIN_HOLDING_USD = 10.0
LOOKUP_BATCH_SIZE = 5

Classification = Literal["FOUNDATION", "AMM", "FOUNDER", "DESO_BULL"]

A = TypeVar("A")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class TrackedWallet:
    username: str
    classification: Classification
    display_name: str | None = None

    @property
    def name(self) -> str:
        return self.display_name or self.username


@dataclass(frozen=True, slots=True)
class HolderToken:
    """A DAO coin looked up through its creator's holder list."""

    creator_username: str
    token: str
    price_usd: float


TRACKED_WALLETS: tuple[TrackedWallet, ...] = (
    TrackedWallet("Gringotts_Wizarding_Bank", "FOUNDATION"),
    TrackedWallet("FOCUS_COLD_000", "FOUNDATION"),
    TrackedWallet("focus", "FOUNDATION"),
    TrackedWallet("openfund", "FOUNDATION"),
    TrackedWallet("Deso", "FOUNDATION"),
    TrackedWallet("AMM_DESO_24_PlAEU", "AMM"),
    TrackedWallet("AMM_DESO_23_GrYpe", "AMM"),
    TrackedWallet("AMM_focus_12_nzWku", "AMM"),
    TrackedWallet("AMM_openfund_12_gOR1b", "AMM"),
    TrackedWallet("AMM_DESO_19_W5vn0", "AMM"),
    TrackedWallet("AMM_openfund_13_1gbih", "AMM"),
    TrackedWallet("Whoami", "FOUNDER"),
    TrackedWallet("Nader", "FOUNDER"),
    TrackedWallet("Mossified", "FOUNDER"),
    TrackedWallet("LazyNina", "FOUNDER"),
    TrackedWallet("Randhir", "DESO_BULL", "Randhir (Me)"),
    TrackedWallet("HighKey", "DESO_BULL"),
    TrackedWallet("JordanLintz", "DESO_BULL"),
    TrackedWallet("LukeLintz", "DESO_BULL"),
    TrackedWallet("StarGeezer", "DESO_BULL"),
    TrackedWallet("DesocialWorld", "DESO_BULL"),
    TrackedWallet("Edokoevoet", "DESO_BULL"),
    TrackedWallet("Gabrielist", "DESO_BULL"),
    TrackedWallet("RobertGraham", "DESO_BULL"),
    TrackedWallet("0xAustin", "DESO_BULL"),
    TrackedWallet("BenErsing", "DESO_BULL"),
    TrackedWallet("Darian_Parrish", "DESO_BULL"),
    TrackedWallet("VishalGulia", "DESO_BULL"),
    TrackedWallet("ZeroToOne", "DESO_BULL"),
    TrackedWallet("whoisanku", "DESO_BULL"),
    TrackedWallet("fllwthrvr", "DESO_BULL"),
    TrackedWallet("PremierNS", "DESO_BULL"),
    TrackedWallet("WhaleDShark", "DESO_BULL"),
)

# Approximate prices, only used to decide when a holder walk can stop.
HOLDER_TOKENS: tuple[HolderToken, ...] = (
    HolderToken("openfund", "Openfund", 0.087),
    HolderToken("focus", "Focus", 0.00034),
    HolderToken("dUSDC_", "dUSDC", 1.0),
    HolderToken("dBTC", "dBTC", 97_400.0),
    HolderToken("dETH", "dETH", 2_640.0),
    HolderToken("dSOL", "dSOL", 196.0),
)

# The focus account's own Focus balance is minted supply, not a holding.
EXCLUDED_HOLDINGS: dict[str, tuple[str, ...]] = {"focus": ("Focus",)}

_STATIC_BALANCES: dict[str, dict[str, Any]] = {
    "Gringotts_Wizarding_Bank": {
        "balances": {
            "DESO": 76_000,
            "dUSDC": 6_590_000,
            "Focus": 1_520_000_000,
            "Openfund": 4_000_000,
            "dBTC": 21.46,
            "dETH": 197,
            "dSOL": 2_610,
        },
        "usd_value": 8_450_000,
    },
    "FOCUS_COLD_000": {
        "balances": {"DESO": 1_000_000},
        "usd_value": 5_780_000,
        "deso_staked": 800_000,
        "deso_unstaked": 200_000,
    },
    "focus": {"balances": {"DESO": 12_000, "Openfund": 1_500_000}, "usd_value": 450_000},
    "openfund": {
        "balances": {"Openfund": 8_000_000, "DESO": 25_000, "Focus": 500_000_000, "dUSDC": 120_000},
        "usd_value": 850_000,
    },
    "Deso": {
        "balances": {"DESO": 95_000, "Openfund": 2_000_000, "Focus": 200_000_000, "dUSDC": 80_000},
        "usd_value": 750_000,
    },
    "AMM_DESO_24_PlAEU": {"balances": {"dUSDC": 1_410_000, "DESO": 96_500}, "usd_value": 1_950_000},
    "AMM_DESO_23_GrYpe": {"balances": {"DESO": 1_440_000, "dUSDC": 3_000}, "usd_value": 8_330_000},
    "AMM_focus_12_nzWku": {"balances": {"Focus": 1_770_000_000}, "usd_value": 601_800},
    "AMM_openfund_12_gOR1b": {"balances": {"Openfund": 5_046_000}, "usd_value": 439_000},
    "AMM_DESO_19_W5vn0": {"balances": {"DESO": 74_048}, "usd_value": 428_000},
    "AMM_openfund_13_1gbih": {"balances": {"Openfund": 1_207_000}, "usd_value": 105_000},
    "Whoami": {
        "balances": {"Openfund": 5_150_000, "dUSDC": 35_000, "Focus": 3_650, "dBTC": 0.176},
        "usd_value": 518_400,
    },
    "Nader": {"balances": {"Openfund": 12_500_000}, "usd_value": 1_087_500},
    "Mossified": {"balances": {"Openfund": 2_800_000}, "usd_value": 243_600},
    "LazyNina": {"balances": {"DESO": 2.93}, "usd_value": 0},
}


def static_wallet_rows(wallets: Iterable[TrackedWallet] = TRACKED_WALLETS) -> list[dict[str, Any]]:
    """Last known balances per tracked wallet; community wallets have none."""
    rows = []
    for wallet in wallets:
        known = copy.deepcopy(_STATIC_BALANCES.get(wallet.name, {}))
        rows.append(
            {
                "name": wallet.name,
                "classification": wallet.classification,
                "balances": known.get("balances", {}),
                "usd_value": known.get("usd_value", 0),
                "deso_staked": known.get("deso_staked"),
                "deso_unstaked": known.get("deso_unstaked"),
            }
        )
    return rows


def dao_coin_balance(hodler: Hodler) -> float:
    """Coin units held; the uint256 hex field is preferred for precision."""
    if hodler.BalanceNanosUint256:
        try:
            return int(hodler.BalanceNanosUint256.removeprefix("0x"), 16) / NANOS_PER_DAO_COIN
        except ValueError:
            return 0.0
    if hodler.BalanceNanos is not None:
        return hodler.BalanceNanos / NANOS_PER_DAO_COIN
    return 0.0


def stake_nanos(entry: StakeEntry) -> int:
    raw = entry.StakeNanos
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw:
        try:
            return int(raw, 16) if raw.startswith("0x") else int(raw)
        except ValueError:
            return 0
    return 0


async def run_batched(
    items: Sequence[A],
    fn: Callable[[A], Awaitable[R]],
    *,
    batch_size: int = LOOKUP_BATCH_SIZE,
) -> list[R]:
    """Run `fn` over `items` with at most `batch_size` calls in flight."""
    results: list[R] = []
    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        results.extend(await asyncio.gather(*(fn(item) for item in batch)))
    return results


class WalletClient:
    """
    Balance lookups against a DeSo node.

    Args:
        transport: Shared HTTP transport.
        node_url: DeSo node API root used for profiles, users and stakes.
        hodlers_url: Node API root serving `get-hodlers-for-public-key`.
        wallets: Accounts to report on.
        tokens: DAO coins whose holder lists are walked.
    """

    def __init__(
        self,
        transport: HttpTransport,
        *,
        node_url: str,
        hodlers_url: str,
        wallets: tuple[TrackedWallet, ...] = TRACKED_WALLETS,
        tokens: tuple[HolderToken, ...] = HOLDER_TOKENS,
    ) -> None:
        self._transport = transport
        self._node_url = node_url.rstrip("/")
        self._hodlers_url = hodlers_url.rstrip("/")
        self._wallets = wallets
        self._tokens = tokens

    async def public_key_for(self, username: str) -> str | None:
        url = f"{self._node_url}/get-single-profile"
        try:
            raw = await self._transport.post_json(url, {"Username": username})
            profile = parse_model(SingleProfile, raw, source=url).Profile
        except ChainboardError as e:
            logger.debug("Profile for %s unavailable: %s", username, e)
            return None
        return profile.PublicKeyBase58Check if profile is not None else None

    async def username_for(self, public_key: str) -> str | None:
        url = f"{self._node_url}/get-single-profile"
        try:
            raw = await self._transport.post_json(url, {"PublicKeyBase58Check": public_key})
            profile = parse_model(SingleProfile, raw, source=url).Profile
        except ChainboardError as e:
            logger.debug("Profile for %s unavailable: %s", public_key, e)
            return None
        return profile.Username if profile is not None else None

    async def resolve_wallets(self) -> dict[str, TrackedWallet]:
        """Public key -> tracked wallet, for every username that resolved."""
        keys = await run_batched(self._wallets, lambda w: self.public_key_for(w.username))
        resolved = {pk: wallet for wallet, pk in zip(self._wallets, keys) if pk}
        if len(resolved) < len(self._wallets):
            logger.info("Resolved %d of %d tracked wallets", len(resolved), len(self._wallets))
        return resolved

    async def token_holders(self, token: HolderToken) -> dict[str, float]:
        """Holdings of `token` by public key, down to `MIN_HOLDING_USD`."""
        url = f"{self._hodlers_url}/get-hodlers-for-public-key"
        held: dict[str, float] = {}
        last_key = ""
        while True:
            body = {
                "Username": token.creator_username,
                "LastPublicKeyBase58Check": last_key,
                "NumToFetch": HODLERS_PAGE_SIZE,
                "FetchAll": False,
                "IsDAOCoin": True,
            }
            try:
                raw = await self._transport.post_json(url, body)
                page = parse_model(HodlersPage, raw, source=url)
            except ChainboardError as e:
                logger.debug("Holders of %s unavailable: %s", token.token, e)
                break

            hodlers = page.Hodlers or []
            amounts = [
                (h.HODLerPublicKeyBase58Check, dao_coin_balance(h))
                for h in hodlers
                if h.HODLerPublicKeyBase58Check
            ]
            amounts = [(pk, amount) for pk, amount in amounts if amount > 0]
            for pk, amount in amounts:
                held[pk] = held.get(pk, 0.0) + amount

            last_key = page.LastPublicKeyBase58Check or ""
            smallest = min((amount for _, amount in amounts), default=None)
            below_floor = (
                token.price_usd > 0
                and smallest is not None
                and smallest * token.price_usd < MIN_HOLDING_USD
            )
            if len(hodlers) < HODLERS_PAGE_SIZE or not last_key or below_floor:
                break
        return held

    async def user_balances(self, public_keys: list[str]) -> dict[str, UserBalance]:
        if not public_keys:
            return {}
        url = f"{self._node_url}/get-users-stateless"
        body = {
            "PublicKeysBase58Check": public_keys,
            "SkipForLeaderboard": False,
            "IncludeBalance": True,
        }
        try:
            raw = await self._transport.post_json(url, body)
            users = parse_model(UsersStateless, raw, source=url).UserList or []
        except ChainboardError as e:
            logger.debug("User balances unavailable: %s", e)
            return {}
        return {u.PublicKeyBase58Check: u for u in users if u.PublicKeyBase58Check}

    async def stake_entries(self, public_key: str) -> list[StakeEntry]:
        url = f"{self._node_url}/get-stake-entries-for-public-key"
        try:
            raw = await self._transport.post_json(url, {"PublicKeyBase58Check": public_key})
            return parse_model(StakeEntries, raw, source=url).StakeEntries or []
        except ChainboardError as e:
            logger.debug("Stake entries for %s unavailable: %s", public_key, e)
            return []

    async def fetch_rows(self) -> list[dict[str, Any]]:
        """One row per resolved wallet with its DESO and DAO coin balances."""
        tracked = await self.resolve_wallets()
        public_keys = list(tracked)

        token_holdings: dict[str, dict[str, float]] = {}
        for token in self._tokens:
            for pk, amount in (await self.token_holders(token)).items():
                if pk in tracked:
                    per_token = token_holdings.setdefault(pk, {})
                    per_token[token.token] = per_token.get(token.token, 0.0) + amount

        users = await self.user_balances(public_keys)
        entries = await run_batched(public_keys, self.stake_entries)

        rows = []
        for pk, stakes in zip(public_keys, entries):
            wallet = tracked[pk]
            user = users.get(pk)
            spendable_nanos = 0
            if user is not None:
                spendable_nanos = user.DESOBalanceNanos or user.BalanceNanos or 0
            unstaked = spendable_nanos / NANOS_PER_DESO
            staked = sum(stake_nanos(e) for e in stakes) / NANOS_PER_DESO
            if staked == 0 and user is not None and user.LockedBalanceNanos is not None:
                staked = user.LockedBalanceNanos / NANOS_PER_DESO

            balances = {t: a for t, a in token_holdings.get(pk, {}).items() if a > 0}
            if unstaked + staked > 0:
                balances["DESO"] = unstaked + staked
            for token in EXCLUDED_HOLDINGS.get(wallet.name, ()):
                balances.pop(token, None)

            rows.append(
                {
                    "name": wallet.name,
                    "classification": wallet.classification,
                    "balances": balances,
                    "usd_value": 0,
                    "deso_staked": staked,
                    "deso_unstaked": unstaked,
                }
            )
        return rows


def merge_wallet_with_static(row: dict[str, Any], static_row: dict[str, Any]) -> dict[str, Any]:
    """Per token keep the live balance when positive, else the static one."""
    live = row.get("balances") or {}
    fallback = static_row.get("balances") or {}
    merged = {
        token: (live.get(token, 0) if live.get(token, 0) > 0 else fallback.get(token, 0))
        for token in {*fallback, *live}
    }
    result = {**static_row, **row, "balances": merged}
    for field in ("deso_staked", "deso_unstaked"):
        if row.get(field) is None:
            result[field] = static_row.get(field)
    return result


def merge_wallets_with_static(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    static_by_name = {r["name"]: r for r in static_wallet_rows()}
    return [
        merge_wallet_with_static(row, static_by_name[row["name"]])
        if row.get("name") in static_by_name
        else row
        for row in rows
    ]


def has_meaningful_balances(rows: list[dict[str, Any]]) -> bool:
    """At least one wallet reports a positive balance."""
    return any(
        isinstance(amount, (int, float)) and amount > 0
        for row in rows
        for amount in (row.get("balances") or {}).values()
    )


async def fetch_wallet_balances(
    transport: HttpTransport,
    *,
    node_url: str,
    hodlers_url: str,
) -> list[dict[str, Any]]:
    """Balances of every tracked wallet."""
    client = WalletClient(transport, node_url=node_url, hodlers_url=hodlers_url)
    return await client.fetch_rows()
