"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Response schemas for the remote data sources.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import SchemaValidationFailure

M = TypeVar("M", bound=BaseModel)


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def parse_model(model: type[M], payload: Any, *, source: str) -> M:
    """Validate `payload` against `model`, mapping errors to the taxonomy."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise SchemaValidationFailure(
            f"Unexpected response shape from {source}: {e.error_count()} error(s)"
        ) from e


class UsdQuote(_Lenient):
    usd: float


class CoinGeckoSimplePrice(_Lenient):
    bitcoin: UsdQuote
    ethereum: UsdQuote
    solana: UsdQuote
    deso_dashed: UsdQuote | None = Field(default=None, alias="decentralized-social")
    deso_underscored: UsdQuote | None = Field(default=None, alias="decentralized_social")


class DesoExchangeRate(_Lenient):
    USDCentsPerDeSoExchangeRate: float
    SatoshisPerDeSoExchangeRate: float
    USDCentsPerBitcoinExchangeRate: float


class DesoAppState(_Lenient):
    BlockHeight: int | None = None


class BlockTemplateStats(_Lenient):
    TxnCount: int | None = None


class DesoBlockTemplate(_Lenient):
    LatestBlockTemplateStats: BlockTemplateStats | None = None


class MempoolChainStats(_Lenient):
    funded_txo_sum: int = 0
    spent_txo_sum: int = 0


class MempoolAddress(_Lenient):
    chain_stats: MempoolChainStats = Field(default_factory=MempoolChainStats)


class SolBalance(_Lenient):
    value: int = 0


class HistodayPoint(_Lenient):
    time: int
    close: float


class HistodayData(_Lenient):
    Data: list[HistodayPoint] = Field(default_factory=list)


class CryptoCompareHistoday(_Lenient):
    Response: str | None = None
    Data: HistodayData | None = None


class GraphQLError(_Lenient):
    message: str | None = None


class GraphQLEnvelope(_Lenient):
    data: dict[str, Any] | None = None
    errors: list[GraphQLError] | None = None


class PageInfo(_Lenient):
    hasNextPage: bool = False
    endCursor: str | None = None


class Connection(_Lenient):
    nodes: list[dict[str, Any]] = Field(default_factory=list)
    pageInfo: PageInfo = Field(default_factory=PageInfo)
    totalCount: int | None = None


class DesoProfile(_Lenient):
    PublicKeyBase58Check: str | None = None
    Username: str | None = None


class SingleProfile(_Lenient):
    Profile: DesoProfile | None = None


class Hodler(_Lenient):
    HODLerPublicKeyBase58Check: str | None = None
    BalanceNanos: float | None = None
    BalanceNanosUint256: str | None = None


class HodlersPage(_Lenient):
    Hodlers: list[Hodler] | None = None
    LastPublicKeyBase58Check: str | None = None


class UserBalance(_Lenient):
    PublicKeyBase58Check: str | None = None
    DESOBalanceNanos: int | None = None
    BalanceNanos: int | None = None
    LockedBalanceNanos: int | None = None


class UsersStateless(_Lenient):
    UserList: list[UserBalance] | None = None


class StakeEntry(_Lenient):
    StakeNanos: int | str | None = None
    ValidatorPublicKeyBase58Check: str | None = None


class StakeEntries(_Lenient):
    StakeEntries: list[StakeEntry] | None = None
