"""Batch call aggregation over Multicall3.

`MultiWrapper.aggregate` splits a list of calls into batches, sends each
batch as one `aggregate3` `eth_call` pinned to a block, and returns the
decoded results in input order. Any reverted or undersized inner result fails
the whole aggregate; there is no partial-result contract and no caching.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from fluidstate.constants import DEFAULT_BATCH_SIZE, MULTICALL3_ADDRESS
from fluidstate.core.interfaces import IContractCaller
from fluidstate.decoding.decoder import MultiResult, decode_abi
from fluidstate.errors import CallFailedError, DecodeError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

AGGREGATE3_SELECTOR = function_signature_to_4byte_selector("aggregate3((address,bool,bytes)[])")
_CALLS_TYPE = "(address,bool,bytes)[]"
_RESULTS_TYPE = "(bool,bytes)[]"

# Smallest well-formed return value: one ABI word.
MIN_RETURN_DATA = 32


@dataclass(frozen=True, slots=True)
class MultiCallParams(Generic[T]):
    """One read call: target, encoded payload and a stateless decoder."""

    target: str
    call_data: bytes
    decode_function: Callable[[MultiResult], T]


def encode_aggregate3(calls: Sequence[MultiCallParams]) -> bytes:
    """Encode an `aggregate3` call; inner failures are reported, not reverted."""
    structs = [(to_checksum_address(c.target), True, c.call_data) for c in calls]
    return AGGREGATE3_SELECTOR + encode([_CALLS_TYPE], [structs])


def decode_aggregate3(raw: bytes) -> list[MultiResult]:
    try:
        (results,) = decode_abi([_RESULTS_TYPE], raw)
    except DecodeError as e:
        raise TransportError(f"malformed aggregate3 response ({len(raw)} bytes)") from e
    return [MultiResult(success=bool(ok), return_data=bytes(data)) for ok, data in results]


def chunk_calls(calls: Sequence[MultiCallParams[T]], size: int) -> list[Sequence[MultiCallParams[T]]]:
    """Split calls into consecutive batches of at most `size`."""
    return [calls[i : i + size] for i in range(0, len(calls), size)]


class MultiWrapper:
    """Multicall3 aggregator bound to a contract-call transport.

    Parameters
    ----------
    caller : IContractCaller
        Transport executing `eth_call` at a block height.
    multicall_address : str
        Multicall3 deployment.
    default_batch_size : int
        Batch size used when `aggregate` is called without one.
    concurrency : int
        Maximum number of batches in flight at once.
    """

    def __init__(
        self,
        caller: IContractCaller,
        *,
        multicall_address: str = MULTICALL3_ADDRESS,
        default_batch_size: int = DEFAULT_BATCH_SIZE,
        concurrency: int = 4,
    ) -> None:
        if default_batch_size < 1:
            raise ValueError("default_batch_size must be >= 1")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.caller = caller
        self.multicall_address = to_checksum_address(multicall_address)
        self.default_batch_size = default_batch_size
        self.concurrency = concurrency

    async def _execute_batch(
        self,
        batch: Sequence[MultiCallParams[T]],
        offset: int,
        block_number: int,
        sem: asyncio.Semaphore,
    ) -> list[MultiResult]:
        async with sem:
            raw = await self.caller.call(
                to=self.multicall_address,
                data=encode_aggregate3(batch),
                block_number=block_number,
            )
        results = decode_aggregate3(raw)
        if len(results) != len(batch):
            raise TransportError(f"aggregate3 returned {len(results)} results for {len(batch)} calls")
        for i, (call, res) in enumerate(zip(batch, results)):
            if not res.success:
                raise CallFailedError(offset + i, call.target)
            if len(res.return_data) < MIN_RETURN_DATA:
                raise TransportError(
                    f"call #{offset + i} to {call.target} returned {len(res.return_data)} bytes"
                )
        return results

    async def aggregate(
        self,
        calls: Sequence[MultiCallParams[T]],
        block_number: int,
        batch_size: int | None = None,
    ) -> list[T]:
        """Execute `calls` at `block_number` and return decoded results in input order."""
        if not calls:
            raise ValueError("aggregate requires at least one call")
        size = self.default_batch_size if batch_size is None else batch_size
        if size < 1:
            raise ValueError("batch_size must be >= 1")

        batches = chunk_calls(calls, size)
        logger.debug(f"aggregate: {len(calls)} calls in {len(batches)} batches at block {block_number}")

        sem = asyncio.Semaphore(self.concurrency)
        batch_results = await asyncio.gather(
            *(
                self._execute_batch(batch, i * size, block_number, sem)
                for i, batch in enumerate(batches)
            )
        )

        out: list[T] = []
        for batch, results in zip(batches, batch_results):
            for call, res in zip(batch, results):
                out.append(call.decode_function(res))
        return out
