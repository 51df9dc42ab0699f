"""Async JSON-RPC transport: `eth_blockNumber`, `eth_call` and `eth_getLogs`.

`RPC` satisfies both `IContractCaller` and `IEvmLogsProvider`. Logs come back
as `EventLog` records, call results as raw bytes. Every failure surfaces as
`TransportError`, or `RPCError` when the node answered with an error object.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import Any

import httpx

from fluidstate.core.models import EventLog
from fluidstate.decoding.utils import to_raw_bytes
from fluidstate.errors import DecodeError, RPCError, TransportError


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


def topics_param(topic0s: Sequence[str]) -> list[list[str]]:
    """Format topic0 signatures for eth_getLogs RPC call (empty → any topic)."""
    if not topic0s:
        return []
    return [[t.lower() for t in topic0s]]


def _hex_or_int(value: Any) -> int | None:
    if isinstance(value, str) and value.startswith("0x"):
        return int(value, 16)
    return value if isinstance(value, int) else None


def _parse_log(raw: dict[str, Any]) -> EventLog:
    """Map one `eth_getLogs` record to an `EventLog` (hex fields lowercased)."""
    return EventLog(
        address=raw["address"].lower(),
        topics=tuple(str(t).lower() for t in raw.get("topics") or ()),
        data_hex=raw.get("data") or "0x",
        block_number=int(raw["blockNumber"], 16),
        tx_hash=(raw.get("transactionHash") or "").lower(),
        log_index=int(raw["logIndex"], 16),
        block_timestamp=_hex_or_int(raw.get("blockTimestamp")),
    )


class RPC:
    """Minimal async RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    max_connections : int
        Maximum concurrent connections to keep in the pool.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: int = 20,
        max_connections: int = 64,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._ids = itertools.count(1)
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            http2=transport is None,
            transport=transport,
        )

    async def _request(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            r = await self.client.post(self.url, json=payload)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"{method} returned a non-JSON body") from e
        if "error" in data:
            err = data["error"]
            if isinstance(err, dict):
                raise RPCError(err.get("code"), str(err.get("message")))
            raise RPCError(None, str(err))
        if "result" not in data:
            raise TransportError(f"{method} response has no result")
        return data["result"]

    async def latest_block(self) -> int:
        """Return the latest block number as an int."""
        return int(await self._request("eth_blockNumber", []), 16)

    async def call(self, *, to: str, data: bytes, block_number: int) -> bytes:
        """Execute `eth_call` at `block_number` and return the raw return data."""
        result = await self._request(
            "eth_call",
            [{"to": to, "data": "0x" + data.hex()}, to_hex_block(block_number)],
        )
        try:
            return to_raw_bytes(result)
        except DecodeError as e:
            raise TransportError(f"eth_call returned malformed data: {result!r}") from e

    async def get_logs(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Fetch logs for an address and a set of topic0 signatures within a block range."""
        params = [
            {
                "address": address.lower(),
                "fromBlock": to_hex_block(from_block),
                "toBlock": to_hex_block(to_block),
                "topics": topics_param(topic0s),
            }
        ]
        result = await self._request("eth_getLogs", params)
        return [_parse_log(rl) for rl in result or []]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> RPC:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
