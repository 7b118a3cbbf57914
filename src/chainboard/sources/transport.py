"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP transport for JSON REST and JSON-RPC calls.

Requests run through a blocking sender on a worker thread
(`asyncio.to_thread`) so the event loop never blocks. The default sender uses
`urllib.request`; tests inject their own.
"""

from __future__ import annotations

import asyncio
import json
import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import SchemaValidationFailure, TransportFailure

logger = logging.getLogger("chainboard.transport")


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    timeout_s: float = 15.0


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise SchemaValidationFailure(f"Response is not valid JSON: {e}") from e


Sender = Callable[[HttpRequest], HttpResponse]


def with_query(url: str, params: Mapping[str, Any] | None) -> str:
    if not params:
        return url
    query = urllib.parse.urlencode({k: v for k, v in params.items() if v is not None})
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def urllib_send(request: HttpRequest) -> HttpResponse:
    """Blocking sender backed by `urllib.request`."""
    req = urllib.request.Request(
        request.url,
        data=request.body,
        method=request.method,
        headers=request.headers,
    )
    try:
        with urllib.request.urlopen(req, timeout=request.timeout_s) as resp:  # noqa: S310
            return HttpResponse(status=resp.status, body=resp.read())
    except urllib.error.HTTPError as e:
        body = b""
        try:
            body = e.read()
        except Exception:  # noqa: BLE001
            body = b""
        return HttpResponse(status=e.code, body=body)
    except urllib.error.URLError as e:
        raise TransportFailure(f"Network error calling {request.url}: {e.reason}") from e
    except (socket.timeout, TimeoutError) as e:
        raise TransportFailure(f"Timeout calling {request.url}") from e


class HttpTransport:
    """
    Async JSON-over-HTTP client.

    Args:
        timeout_s: Per-request timeout handed to the sender.
        headers: Headers sent with every request.
        send: Blocking sender; defaults to `urllib_send`.
    """

    def __init__(
        self,
        *,
        timeout_s: float = 15.0,
        headers: Mapping[str, str] | None = None,
        send: Sender | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._send = send or urllib_send

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        raise_for_status: bool = True,
    ) -> HttpResponse:
        merged = {**self._headers, **(headers or {})}
        body: bytes | None = None
        if json_body is not None:
            body = json.dumps(json_body).encode("utf-8")
            merged.setdefault("Content-Type", "application/json")
        request = HttpRequest(
            method=method.upper(),
            url=with_query(url, params),
            headers=merged,
            body=body,
            timeout_s=self._timeout_s,
        )
        try:
            response = await asyncio.to_thread(self._send, request)
        except TransportFailure:
            raise
        except OSError as e:
            raise TransportFailure(f"Network error calling {request.url}: {e}") from e

        logger.debug("%s %s -> %d", request.method, request.url, response.status)
        if raise_for_status and not response.ok:
            raise TransportFailure(
                f"HTTP {response.status} from {request.method} {request.url}",
                status=response.status,
            )
        return response

    async def get_json(self, url: str, *, params: Mapping[str, Any] | None = None) -> Any:
        response = await self.request("GET", url, params=params)
        return response.json()

    async def post_json(self, url: str, body: Any) -> Any:
        response = await self.request("POST", url, json_body=body)
        return response.json()

    async def json_rpc(self, url: str, method: str, params: list[Any]) -> Any:
        """Call one JSON-RPC 2.0 method and return its `result`."""
        decoded = await self.post_json(
            url,
            {"jsonrpc": "2.0", "id": uuid.uuid4().hex, "method": method, "params": params},
        )
        if not isinstance(decoded, dict):
            raise SchemaValidationFailure(f"Invalid JSON-RPC envelope from {url}")
        err = decoded.get("error")
        if err is not None:
            message = err.get("message") if isinstance(err, dict) else None
            raise TransportFailure(f"JSON-RPC '{method}' failed at {url}: {message or err}")
        if "result" not in decoded:
            raise SchemaValidationFailure(f"Missing JSON-RPC result from {url}")
        return decoded["result"]
