from __future__ import annotations

import asyncio

import pytest

from chainboard.errors import AggregationPartial, TransportFailure
from chainboard.pagination import Page, PaginatedAggregator, numeric_field, sum_paginated


def run_async(coro):
    return asyncio.run(coro)


def pages_fetcher(pages: dict[str | None, Page], calls: list[str | None] | None = None):
    async def fetch_page(cursor: str | None) -> Page:
        if calls is not None:
            calls.append(cursor)
        page = pages[cursor]
        if isinstance(page, Exception):
            raise page
        return page

    return fetch_page


def test_sums_every_page_in_cursor_order():
    calls: list[str | None] = []
    fetch_page = pages_fetcher(
        {
            None: Page(items=[{"amount": 1}, {"amount": 2}], has_next=True, next_cursor="c1"),
            "c1": Page(items=[{"amount": 0.5}], has_next=False),
        },
        calls,
    )

    result = run_async(sum_paginated(fetch_page, "amount"))

    assert result.complete
    assert result.total == 3.5
    assert result.pages == 2
    assert result.items == 3
    assert calls == [None, "c1"]


def test_missing_or_malformed_field_counts_as_zero():
    fetch_page = pages_fetcher(
        {
            None: Page(
                items=[{"amount": 1}, {}, {"amount": "2.5"}, {"amount": "n/a"}, {"amount": True}],
                has_next=False,
            )
        }
    )

    result = run_async(sum_paginated(fetch_page, "amount"))

    assert result.complete
    assert result.total == 3.5


def test_page_failure_yields_partial_result():
    fetch_page = pages_fetcher(
        {
            None: Page(items=[{"amount": 4}], has_next=True, next_cursor="c1"),
            "c1": TransportFailure("timeout"),
        }
    )

    result = run_async(sum_paginated(fetch_page, "amount"))

    assert not result.complete
    assert result.total == 4
    assert result.pages == 1
    assert isinstance(result.error, TransportFailure)
    with pytest.raises(AggregationPartial) as info:
        result.require_complete()
    assert info.value.partial_total == 4


def test_empty_collection_is_complete_zero():
    fetch_page = pages_fetcher({None: Page(items=[], has_next=False)})

    result = run_async(sum_paginated(fetch_page, "amount"))

    assert result.complete
    assert result.require_complete() == 0.0


def test_scale_divides_total():
    fetch_page = pages_fetcher(
        {None: Page(items=[{"totalValueNanos": "1500000000"}], has_next=False)}
    )

    result = run_async(PaginatedAggregator("totalValueNanos", scale=1e9).aggregate(fetch_page))

    assert result.total == 1.5


def test_repeated_or_missing_cursor_stops_as_incomplete():
    looping = pages_fetcher(
        {
            None: Page(items=[{"amount": 1}], has_next=True, next_cursor="c1"),
            "c1": Page(items=[{"amount": 1}], has_next=True, next_cursor="c1"),
        }
    )
    missing = pages_fetcher({None: Page(items=[{"amount": 1}], has_next=True)})

    looped = run_async(sum_paginated(looping, "amount"))
    dangling = run_async(sum_paginated(missing, "amount"))

    assert not looped.complete
    assert looped.total == 2
    assert not dangling.complete
    assert dangling.total == 1


def test_max_pages_bound():
    fetch_page = pages_fetcher(
        {
            None: Page(items=[{"amount": 1}], has_next=True, next_cursor="a"),
            "a": Page(items=[{"amount": 1}], has_next=True, next_cursor="b"),
            "b": Page(items=[{"amount": 1}], has_next=False),
        }
    )

    result = run_async(sum_paginated(fetch_page, "amount", max_pages=2))

    assert not result.complete
    assert result.total == 2


def test_numeric_field_edge_cases():
    assert numeric_field({"v": 3}, "v") == 3.0
    assert numeric_field({"v": " 4.5 "}, "v") == 4.5
    assert numeric_field({"v": None}, "v") == 0.0
    assert numeric_field({"v": float("inf")}, "v") == 0.0
    assert numeric_field("not a mapping", "v") == 0.0


def test_empty_page_with_more_to_come_keeps_walking():
    calls: list[str | None] = []
    fetch_page = pages_fetcher(
        {
            None: Page(items=[{"amount": 2}], has_next=True, next_cursor="c1"),
            "c1": Page(items=[], has_next=True, next_cursor="c2"),
            "c2": Page(items=[{"amount": 3}], has_next=False),
        },
        calls,
    )

    result = run_async(sum_paginated(fetch_page, "amount"))

    assert result.complete
    assert result.total == 5
    assert result.pages == 3
    assert result.items == 2
    assert calls == [None, "c1", "c2"]


def test_nano_strings_across_three_pages_then_empty_tail():
    fetch_page = pages_fetcher(
        {
            None: Page(items=[{"totalValueNanos": "1000000000"}], has_next=True, next_cursor="p2"),
            "p2": Page(items=[{"totalValueNanos": "2000000000"}], has_next=True, next_cursor="p3"),
            "p3": Page(items=[{"totalValueNanos": "500000000"}], has_next=True, next_cursor="p4"),
            "p4": Page(items=[], has_next=False),
        }
    )

    result = run_async(PaginatedAggregator("totalValueNanos", scale=1e9).aggregate(fetch_page))

    assert result.complete
    assert result.total == 3.5
    assert result.pages == 4
    assert result.items == 3


def test_one_aggregator_serves_concurrent_walks():
    pages = {
        None: Page(items=[{"amount": 1}], has_next=True, next_cursor="c1"),
        "c1": Page(items=[{"amount": 1}], has_next=False),
    }

    async def fetch_page(cursor: str | None) -> Page:
        await asyncio.sleep(0)
        return pages[cursor]

    aggregator = PaginatedAggregator("amount")

    async def main():
        return await asyncio.gather(
            aggregator.aggregate(fetch_page), aggregator.aggregate(fetch_page)
        )

    first, second = run_async(main())

    assert first.complete and second.complete
    assert first.total == second.total == 2.0
