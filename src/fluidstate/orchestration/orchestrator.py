"""Wiring: concrete RPC + multicall + subscribers from a `FluidDexConfig`.

The use cases in `fluidstate.core` only depend on interfaces. This module
instantiates `RPC` and `MultiWrapper` for CLI / script usage and owns the
client lifecycle (every helper closes its RPC client).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fluidstate.clients.multicall import MultiWrapper
from fluidstate.clients.rpc import RPC
from fluidstate.core.config import FluidDexConfig
from fluidstate.core.models import Pool, PoolReserves, StateVersion
from fluidstate.core.interfaces import IContractCaller
from fluidstate.core.use_cases.replay import ReplayHead, ReplayStats, replay_logs
from fluidstate.decoding.specs import get_event_registry_topic0s
from fluidstate.dex.factory import FluidDexFactory
from fluidstate.dex.pool import FluidDexEventPool

PARENT_NAME = "FluidDex"


@dataclass(kw_only=True)
class Clients:
    rpc: RPC
    multi_wrapper: MultiWrapper


@asynccontextmanager
async def open_clients(config: FluidDexConfig) -> AsyncIterator[Clients]:
    rpc = RPC(config.rpc_url, timeout_s=config.timeout_s)
    try:
        yield Clients(
            rpc=rpc,
            multi_wrapper=MultiWrapper(
                rpc,
                multicall_address=config.multicall_address,
                default_batch_size=config.batch_size,
                concurrency=config.concurrency,
            ),
        )
    finally:
        await rpc.aclose()


def make_pool_subscriber(
    config: FluidDexConfig,
    clients: Clients,
    pool: str,
    chain: IContractCaller | None = None,
) -> FluidDexEventPool:
    return FluidDexEventPool(
        PARENT_NAME,
        pool,
        config.common_addresses,
        chain=chain or clients.rpc,
        multi_wrapper=clients.multi_wrapper,
    )


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ReplayOutput:
    """High-level output of a pool replay."""

    stats: ReplayStats
    versions: list[StateVersion[PoolReserves]]


async def _resolve_block(clients: Clients, block: int | str) -> int:
    if isinstance(block, str) and block.lower() == "latest":
        return await clients.rpc.latest_block()
    return int(block)


async def snapshot_pool(config: FluidDexConfig, pool: str, block: int | str = "latest") -> StateVersion[PoolReserves]:
    """Read a pool's reserve snapshot directly from chain at `block`."""
    async with open_clients(config) as clients:
        block_number = await _resolve_block(clients, block)
        subscriber = make_pool_subscriber(config, clients, pool)
        state = await subscriber.get_state_or_generate(block_number)
        return StateVersion(block_number=block_number, state=state)


async def replay_pool(
    config: FluidDexConfig,
    pool: str,
    *,
    from_block: int,
    to_block: int | str = "latest",
) -> ReplayOutput:
    """Replay liquidity-layer logs through a pool subscriber.

    The subscriber is seeded with a snapshot at `from_block - 1`, then every
    LogOperate in the range is applied in chain order. Its head follows the
    replayed logs, so each snapshot is committed at the block of its log.
    """
    async with open_clients(config) as clients:
        end = await _resolve_block(clients, to_block)
        head = ReplayHead(clients.rpc, from_block)
        subscriber = make_pool_subscriber(config, clients, pool, chain=head)
        seed = await subscriber.get_state_or_generate(max(0, from_block - 1))
        result = await replay_logs(
            subscriber,
            clients.rpc,
            from_block=from_block,
            to_block=end,
            step=config.log_step,
            topic0s=get_event_registry_topic0s(subscriber.registry),
            initial_state=seed,
            head=head,
        )
        return ReplayOutput(stats=result.stats, versions=subscriber.store.versions())


async def discover_pools(config: FluidDexConfig, block: int | str = "latest") -> tuple[Pool, ...]:
    """List every pool known to the resolver at `block`."""
    async with open_clients(config) as clients:
        block_number = await _resolve_block(clients, block)
        factory = FluidDexFactory(
            PARENT_NAME,
            config.common_addresses,
            chain=clients.rpc,
            multi_wrapper=clients.multi_wrapper,
        )
        return await factory.get_state_or_generate(block_number)
