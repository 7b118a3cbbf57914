"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Minimal GraphQL client with Relay-style connection paging.
"""

from __future__ import annotations

from typing import Any

from ..errors import SchemaValidationFailure
from ..pagination import Page, PageFetcher
from .schemas import Connection, GraphQLEnvelope, parse_model
from .transport import HttpTransport


class GraphQLClient:
    """Posts `{query, variables}` documents to one GraphQL endpoint."""

    def __init__(self, transport: HttpTransport, url: str) -> None:
        self._transport = transport
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run one query and return its `data` object."""
        body: dict[str, Any] = {"query": query}
        if variables is not None:
            body["variables"] = variables
        raw = await self._transport.post_json(self._url, body)
        envelope = parse_model(GraphQLEnvelope, raw, source=self._url)
        if envelope.errors:
            messages = "; ".join(err.message or "unknown error" for err in envelope.errors)
            raise SchemaValidationFailure(f"GraphQL errors from {self._url}: {messages}")
        if envelope.data is None:
            raise SchemaValidationFailure(f"GraphQL response from {self._url} has no data")
        return envelope.data

    async def connection(
        self,
        query: str,
        field: str,
        variables: dict[str, Any] | None = None,
    ) -> Connection:
        """Run `query` and parse `data[field]` as a connection."""
        data = await self.query(query, variables)
        if field not in data or data[field] is None:
            raise SchemaValidationFailure(f"GraphQL response is missing '{field}'")
        return parse_model(Connection, data[field], source=f"{self._url}#{field}")

    def page_fetcher(self, query: str, field: str, *, page_size: int) -> PageFetcher:
        """
        Adapt a connection query into a `PageFetcher`.

        `query` must accept `$first: Int` and `$after: Cursor` variables.
        """

        async def fetch_page(cursor: str | None) -> Page:
            conn = await self.connection(query, field, {"first": page_size, "after": cursor})
            return Page(
                items=conn.nodes,
                has_next=conn.pageInfo.hasNextPage,
                next_cursor=conn.pageInfo.endCursor,
            )

        return fetch_page
