"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dashboard data service binding datasets to their live sources.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .cache.storage.factory import create_storage_from_env
from .cache.store import LocalCacheStore
from .datasets import (
    ANALYTICS,
    BTC_HISTORY,
    CCV1,
    DEFAULT_HISTORY_DAYS,
    EXCHANGE_RATE,
    NETWORK,
    PRICES,
    STAKED,
    TREASURY,
    TREASURY_ADDRESSES,
    WALLETS,
    btc_history_dataset,
    get_dataset,
)
from .fetch.coalescing import RequestCoalescer
from .fetch.contracts import DatasetConfig, FallbackResult
from .fetch.fallback import fetch_with_fallback, initial_value, needs_refresh
from .fetch.observer import FetchObserver, NoOpFetchObserver
from .fetch.revalidate import Revalidation, Revalidator, UpdateCallback
from .kpis import build_kpis
from .settings import DashboardSettings
from .sources.analytics import fetch_analytics_stats
from .sources.ccv1 import fetch_ccv1_network_total
from .sources.graphql import GraphQLClient
from .sources.history import fetch_btc_price_history
from .sources.network import fetch_network_stats
from .sources.prices import fetch_deso_exchange_rate, fetch_live_prices
from .sources.staking import fetch_staked_deso
from .sources.transport import HttpTransport
from .sources.treasury import fetch_treasury_addresses, fetch_treasury_balances
from .sources.wallets import fetch_wallet_balances

logger = logging.getLogger("chainboard.service")

LiveFetchFactory = Callable[[], Awaitable[Any]]


class DashboardService:
    """
    Every dashboard dataset behind one live -> cached -> static chain.

    Args:
        settings: Endpoint and retry settings; defaults to `from_env()`.
        store: Local cache store; defaults to the env-selected backend.
        transport: HTTP transport shared by every source.
        observer: Instrumentation hooks for the fallback chain.
        on_update: Called when a background refresh replaces a value.
    """

    def __init__(
        self,
        *,
        settings: DashboardSettings | None = None,
        store: LocalCacheStore | None = None,
        transport: HttpTransport | None = None,
        observer: FetchObserver | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self.settings = settings or DashboardSettings.from_env()
        self.store = store or LocalCacheStore(create_storage_from_env())
        self.transport = transport or HttpTransport(timeout_s=self.settings.timeout_s)
        self.graphql = GraphQLClient(self.transport, self.settings.deso_graphql_url)
        self.observer = observer or NoOpFetchObserver()
        self._coalescer = RequestCoalescer()
        self._revalidator = Revalidator(self.store, observer=self.observer, on_update=on_update)
        self._live: dict[str, LiveFetchFactory] = {
            PRICES: self._live_prices,
            EXCHANGE_RATE: self._live_exchange_rate,
            ANALYTICS: self._live_analytics,
            NETWORK: self._live_network,
            TREASURY: self._live_treasury,
            TREASURY_ADDRESSES: self._live_treasury_addresses,
            WALLETS: self._live_wallets,
            STAKED: self._live_staked,
            BTC_HISTORY: self._live_btc_history,
            CCV1: self._live_ccv1,
        }

    # Live fetchers -----------------------------------------------------

    async def _live_prices(self) -> dict[str, float]:
        return await fetch_live_prices(self.transport, base_url=self.settings.coingecko_url)

    async def _live_exchange_rate(self) -> dict[str, Any]:
        return await fetch_deso_exchange_rate(
            self.transport, node_url=self.settings.deso_node_url
        )

    async def _live_analytics(self) -> dict[str, Any]:
        return await fetch_analytics_stats(self.graphql)

    async def _live_network(self) -> dict[str, Any]:
        return await fetch_network_stats(self.transport, node_url=self.settings.deso_node_url)

    async def _live_treasury(self) -> dict[str, Any]:
        return await fetch_treasury_balances(
            self.transport,
            mempool_url=self.settings.mempool_url,
            eth_rpc_url=self.settings.eth_rpc_url,
            sol_rpc_url=self.settings.sol_rpc_url,
        )

    async def _live_treasury_addresses(self) -> list[dict[str, Any]]:
        return await fetch_treasury_addresses(
            self.transport,
            mempool_url=self.settings.mempool_url,
            eth_rpc_url=self.settings.eth_rpc_url,
            sol_rpc_url=self.settings.sol_rpc_url,
        )

    async def _live_wallets(self) -> list[dict[str, Any]]:
        return await fetch_wallet_balances(
            self.transport,
            node_url=self.settings.deso_node_url,
            hodlers_url=self.settings.deso_hodlers_url,
        )

    async def _live_staked(self) -> list[dict[str, Any]]:
        return await fetch_staked_deso(
            self.transport,
            node_url=self.settings.deso_node_url,
            hodlers_url=self.settings.deso_hodlers_url,
        )

    async def _live_btc_history(self, days: int | None = None) -> list[dict[str, Any]]:
        return await fetch_btc_price_history(
            self.transport,
            days or DEFAULT_HISTORY_DAYS,
            base_url=self.settings.cryptocompare_url,
            proxy_url=self.settings.cors_proxy_url,
        )

    async def _live_ccv1(self) -> float:
        return await fetch_ccv1_network_total(
            self.graphql,
            page_size=self.settings.graphql_page_size,
            max_pages=self.settings.graphql_max_pages,
        )

    # Chain plumbing ----------------------------------------------------

    def _with_retry(self, config: DatasetConfig[Any]) -> DatasetConfig[Any]:
        return dataclasses.replace(config, retry=self.settings.retry_policy())

    async def _resolve(
        self, config: DatasetConfig[Any], live_fetch: LiveFetchFactory
    ) -> FallbackResult[Any]:
        """Concurrent calls for the same key share one fallback-chain run."""
        return await self._coalescer.run(
            config.key,
            lambda: fetch_with_fallback(
                self._with_retry(config),
                live_fetch,
                store=self.store,
                observer=self.observer,
            ),
        )

    # Public API --------------------------------------------------------

    def datasets(self) -> list[str]:
        return sorted(self._live)

    def initial(self, dataset: str) -> FallbackResult[Any]:
        """First-paint value for `dataset`: cached if present, else static."""
        return initial_value(get_dataset(dataset), self.store, observer=self.observer)

    def is_stale(self, dataset: str) -> bool:
        return needs_refresh(get_dataset(dataset), self.store)

    def is_updating(self, dataset: str) -> bool:
        return self._revalidator.is_updating(get_dataset(dataset).key)

    def refresh(self, dataset: str) -> Revalidation[Any]:
        """Start a background refresh; the placeholder is available immediately."""
        config = self._with_retry(get_dataset(dataset))
        return self._revalidator.start(config, self._live[dataset])

    async def fetch(self, dataset: str) -> FallbackResult[Any]:
        return await self._resolve(get_dataset(dataset), self._live[dataset])

    async def prices(self) -> FallbackResult[dict[str, float]]:
        return await self.fetch(PRICES)

    async def exchange_rate(self) -> FallbackResult[dict[str, Any]]:
        return await self.fetch(EXCHANGE_RATE)

    async def analytics(self) -> FallbackResult[dict[str, Any]]:
        return await self.fetch(ANALYTICS)

    async def network(self) -> FallbackResult[dict[str, Any]]:
        return await self.fetch(NETWORK)

    async def treasury(self) -> FallbackResult[dict[str, Any]]:
        return await self.fetch(TREASURY)

    async def treasury_addresses(self) -> FallbackResult[list[dict[str, Any]]]:
        return await self.fetch(TREASURY_ADDRESSES)

    async def wallets(self) -> FallbackResult[list[dict[str, Any]]]:
        return await self.fetch(WALLETS)

    async def staked(self) -> FallbackResult[list[dict[str, Any]]]:
        return await self.fetch(STAKED)

    async def ccv1_network_total(self) -> FallbackResult[float]:
        return await self.fetch(CCV1)

    async def btc_price_history(self, days: int | None = None) -> FallbackResult[list[dict[str, Any]]]:
        if days is None:
            return await self.fetch(BTC_HISTORY)
        config = btc_history_dataset(days)
        return await self._resolve(config, lambda: self._live_btc_history(days))

    async def load_all(self) -> dict[str, FallbackResult[Any]]:
        """Fetch every dataset concurrently; one failure never blocks another."""
        names = self.datasets()
        results = await asyncio.gather(*(self.fetch(name) for name in names))
        loaded = dict(zip(names, results))
        degraded = [name for name, result in loaded.items() if not result.is_live]
        if degraded:
            logger.info("Dashboard loaded with fallbacks for: %s", ", ".join(degraded))
        return loaded

    async def kpis(self) -> dict[str, float]:
        prices, treasury = await asyncio.gather(self.prices(), self.treasury())
        return build_kpis(prices.value, treasury.value)
