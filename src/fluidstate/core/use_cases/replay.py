from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from fluidstate.core.interfaces import IContractCaller, IEvmLogsProvider, SynchronizableStateSource
from fluidstate.core.models import EventLog
from fluidstate.orchestration.utils import iter_chunks

logger = logging.getLogger(__name__)

S = TypeVar("S")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ReplayStats:
    """
    Counters for one replay run.

    - `chunks`: eth_getLogs ranges requested (per address)
    - `logs`: logs offered to the source
    - `updates`: logs for which the source returned a new state
    """

    chunks: int = 0
    logs: int = 0
    updates: int = 0
    last_block: int | None = None


@dataclass(kw_only=True)
class ReplayResult(Generic[S]):
    stats: ReplayStats
    state: S | None


# ---------------------------------------------------------------------------
# Head view
# ---------------------------------------------------------------------------


class ReplayHead:
    """Contract caller whose chain head is the block of the log being replayed.

    Subscribers read "the current head" when they regenerate; wiring one of
    these in as their `chain` pins every regeneration during a replay to the
    height of the log that triggered it. `call` is forwarded unchanged.
    """

    def __init__(self, caller: IContractCaller, block_number: int = 0) -> None:
        self.caller = caller
        self.block_number = block_number

    async def latest_block(self) -> int:
        return self.block_number

    async def call(self, *, to: str, data: bytes, block_number: int) -> bytes:
        return await self.caller.call(to=to, data=data, block_number=block_number)


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


async def _fetch_chunk_logs(
    logs_provider: IEvmLogsProvider,
    addresses: Sequence[str],
    topic0s: Sequence[str],
    from_block: int,
    to_block: int,
) -> list[EventLog]:
    per_address = await asyncio.gather(
        *(
            logs_provider.get_logs(
                address=address,
                topic0s=topic0s,
                from_block=from_block,
                to_block=to_block,
            )
            for address in addresses
        )
    )
    logs = [log for chunk in per_address for log in chunk]
    logs.sort(key=lambda log: (log.block_number, log.log_index))
    return logs


async def replay_logs(
    source: SynchronizableStateSource[S],
    logs_provider: IEvmLogsProvider,
    *,
    from_block: int,
    to_block: int,
    step: int,
    topic0s: Sequence[str] = (),
    initial_state: S | None = None,
    head: ReplayHead | None = None,
) -> ReplayResult[S]:
    """Feed every log of the source's addresses in [from_block, to_block] to it.

    Logs are applied strictly one at a time in (block, log index) order; the
    state returned by one `process_log` call is passed to the next.
    When `head` is given it is moved to each log's block before the log is
    applied. Transport and regeneration errors propagate to the caller.
    """
    if from_block > to_block:
        raise ValueError("from_block must be <= to_block")

    stats = ReplayStats()
    state = initial_state
    addresses = list(source.addresses_subscribed)

    for a, b in iter_chunks(from_block, to_block, step):
        logs = await _fetch_chunk_logs(logs_provider, addresses, topic0s, a, b)
        stats.chunks += len(addresses)
        for log in logs:
            stats.logs += 1
            if head is not None:
                head.block_number = log.block_number
            new_state = await source.process_log(state, log)
            if new_state is not None:
                state = new_state
                stats.updates += 1
                stats.last_block = log.block_number

    logger.info(
        f"replayed blocks {from_block}-{to_block}: {stats.logs} logs, {stats.updates} state updates"
    )
    return ReplayResult(stats=stats, state=state)
