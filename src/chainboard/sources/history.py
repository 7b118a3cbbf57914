"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Daily BTC closing prices from CryptoCompare.
"""

from __future__ import annotations

import urllib.parse
from datetime import datetime, timezone

from ..errors import SchemaValidationFailure
from .schemas import CryptoCompareHistoday, parse_model
from .transport import HttpTransport


def iso_day(unix_s: int) -> str:
    return datetime.fromtimestamp(unix_s, tz=timezone.utc).date().isoformat()


async def fetch_btc_price_history(
    transport: HttpTransport,
    days: int,
    *,
    base_url: str,
    proxy_url: str | None = None,
) -> list[dict[str, float | str]]:
    """
    `[{date, price}]` daily closes for the last `days` days, oldest first.

    CryptoCompare blocks browser origins, so the request can be routed
    through a `?quest=`-style proxy. Zero closes are dropped.
    """
    if days <= 0:
        raise ValueError("days must be positive")
    target = f"{base_url.rstrip('/')}/histoday?fsym=BTC&tsym=USD&limit={int(days)}"
    url = target if not proxy_url else f"{proxy_url}{urllib.parse.quote(target, safe='')}"
    raw = await transport.get_json(url)
    data = parse_model(CryptoCompareHistoday, raw, source="cryptocompare histoday")
    if data.Response != "Success" or data.Data is None:
        raise SchemaValidationFailure(f"CryptoCompare responded {data.Response!r}")
    points = sorted(data.Data.Data, key=lambda p: p.time)
    return [{"date": iso_day(p.time), "price": p.close} for p in points if p.close > 0]
