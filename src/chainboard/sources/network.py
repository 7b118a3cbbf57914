"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Node health, block height and next-block activity from the DeSo node.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..errors import ChainboardError, TransportFailure
from .schemas import DesoAppState, DesoBlockTemplate, parse_model
from .transport import HttpTransport

logger = logging.getLogger("chainboard.sources.network")

# get-block-template requires a syntactically valid public key.
PLACEHOLDER_PUBLIC_KEY = "BC1YLgAJ2kZ7Q4fZp7KzK2Mzr9zyuYPaQ1evEWG4s968sChRBPKbSV1"


async def fetch_node_health(transport: HttpTransport, *, node_url: str) -> dict[str, bool]:
    """A 2xx health check means synced; a network failure means unreachable."""
    try:
        response = await transport.request(
            "GET", f"{node_url.rstrip('/')}/health-check", raise_for_status=False
        )
    except TransportFailure as e:
        logger.debug("Node health check failed: %s", e)
        return {"synced": False, "reachable": False}
    return {"synced": response.ok, "reachable": True}


async def fetch_block_height(transport: HttpTransport, *, node_url: str) -> int | None:
    url = f"{node_url.rstrip('/')}/get-app-state"
    try:
        raw = await transport.post_json(url, {})
        return parse_model(DesoAppState, raw, source=url).BlockHeight
    except ChainboardError as e:
        logger.debug("Block height unavailable: %s", e)
        return None


async def fetch_next_block_txn_count(transport: HttpTransport, *, node_url: str) -> int | None:
    url = f"{node_url.rstrip('/')}/get-block-template"
    try:
        raw = await transport.post_json(
            url,
            {
                "PublicKeyBase58Check": PLACEHOLDER_PUBLIC_KEY,
                "NumHeaders": 1,
                "HeaderVersion": 1,
            },
        )
        stats = parse_model(DesoBlockTemplate, raw, source=url).LatestBlockTemplateStats
    except ChainboardError as e:
        logger.debug("Block template unavailable: %s", e)
        return None
    return stats.TxnCount if stats is not None else None


async def fetch_network_stats(transport: HttpTransport, *, node_url: str) -> dict[str, Any]:
    """
    Combined network snapshot.

    Sub-calls are independent and null-tolerant. Raises `TransportFailure`
    only when the node is unreachable and nothing at all came back.
    """
    block_height, health, txn_count = await asyncio.gather(
        fetch_block_height(transport, node_url=node_url),
        fetch_node_health(transport, node_url=node_url),
        fetch_next_block_txn_count(transport, node_url=node_url),
    )
    if not health["reachable"] and block_height is None and txn_count is None:
        raise TransportFailure(f"DeSo node at {node_url} is unreachable")
    return {
        "block_height": block_height,
        "node_synced": health["synced"] if health["reachable"] else None,
        "node_reachable": health["reachable"],
        "next_block_txn_count": txn_count,
    }
