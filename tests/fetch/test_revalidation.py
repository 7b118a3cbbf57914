from __future__ import annotations

import asyncio

from chainboard.cache import InMemoryStorage, LocalCacheStore
from chainboard.errors import TransportFailure
from chainboard.fetch import DatasetConfig, FallbackSource, Revalidator

NOW = 1_700_000_000_000


def run_async(coro):
    return asyncio.run(coro)


def make_store() -> LocalCacheStore:
    return LocalCacheStore(InMemoryStorage(), clock=lambda: NOW)


CONFIG = DatasetConfig(key="prices", window_ms=60_000, static_default="static")


def test_placeholder_is_available_before_network_resolves():
    async def scenario() -> None:
        store = make_store()
        store.write("prices", "cached")
        gate = asyncio.Event()

        async def live() -> str:
            await gate.wait()
            return "live"

        revalidator = Revalidator(store)
        refresh = revalidator.start(CONFIG, live)

        assert refresh.initial.source is FallbackSource.CACHED
        assert refresh.initial.value == "cached"
        assert refresh.pending
        assert revalidator.is_updating("prices")

        gate.set()
        result = await refresh.wait()

        assert result.value == "live"
        assert revalidator.displayed("prices").value == "live"
        assert not revalidator.is_updating("prices")

    run_async(scenario())


def test_empty_cache_placeholder_is_static_default():
    async def scenario() -> None:
        async def live() -> str:
            raise TransportFailure("offline")

        revalidator = Revalidator(make_store())
        refresh = revalidator.start(CONFIG, live)

        assert refresh.initial.source is FallbackSource.STATIC
        result = await refresh.wait()
        assert result.source is FallbackSource.STATIC
        assert result.value == "static"

    run_async(scenario())


def test_superseded_result_is_ignored():
    async def scenario() -> None:
        store = make_store()
        store.write("prices", "cached")
        gate = asyncio.Event()
        updates: list[str] = []

        async def slow() -> str:
            await gate.wait()
            return "slow"

        async def fast() -> str:
            return "fast"

        revalidator = Revalidator(store, on_update=lambda key, result: updates.append(result.value))
        first = revalidator.start(CONFIG, slow)
        second = revalidator.start(CONFIG, fast)

        assert second.generation == first.generation + 1
        await second.wait()
        assert revalidator.displayed("prices").value == "fast"

        gate.set()
        stale = await first.wait()

        assert stale.value == "slow"
        assert first.superseded
        assert not second.superseded
        assert revalidator.displayed("prices").value == "fast"
        assert updates == ["fast"]

    run_async(scenario())


def test_async_update_callback_is_awaited():
    async def scenario() -> None:
        seen: list[tuple[str, str]] = []

        async def on_update(key, result) -> None:
            await asyncio.sleep(0)
            seen.append((key, result.source.value))

        async def live() -> str:
            return "live"

        revalidator = Revalidator(make_store(), on_update=on_update)
        await revalidator.start(CONFIG, live).wait()

        assert seen == [("prices", "live")]

    run_async(scenario())


def test_next_refresh_starts_from_displayed_value():
    async def scenario() -> None:
        async def live() -> str:
            return "live"

        async def offline() -> str:
            raise TransportFailure("offline")

        revalidator = Revalidator(make_store())
        await revalidator.start(CONFIG, live).wait()
        refresh = revalidator.start(CONFIG, offline)

        assert refresh.initial.value == "live"
        result = await refresh.wait()
        assert result.source is FallbackSource.CACHED
        assert result.value == "live"

    run_async(scenario())
