"""Resolver reads: reserve snapshots and pool listings at a block height.

Decoders here are plain module-level functions over a raw result, so they can
be passed around as `decode_function`s without capturing any instance state.
"""

from __future__ import annotations

import logging
from typing import Any

from fluidstate.clients.multicall import MultiCallParams, MultiWrapper
from fluidstate.core.models import (
    CollateralReserves,
    DebtReserves,
    Pool,
    PoolReserves,
    PoolWithReserves,
)
from fluidstate.decoding.abi import bundled_function, canonical_types, encode_function_call
from fluidstate.decoding.decoder import BytesLike, MultiResult, decode_result

logger = logging.getLogger(__name__)

GET_POOL_RESERVES = bundled_function("resolver", "getPoolReserves")
GET_ALL_POOLS = bundled_function("resolver", "getAllPools")

POOL_WITH_RESERVES_TYPES = canonical_types(GET_POOL_RESERVES.outputs)
ALL_POOLS_TYPES = canonical_types(GET_ALL_POOLS.outputs)


# ---------- decoders ----------


def _parse_pool_with_reserves(decoded: tuple[Any, ...]) -> PoolWithReserves:
    (row,) = decoded
    pool, token0, token1, fee, collateral, debt = row
    return PoolWithReserves(
        pool=pool,
        token0=token0,
        token1=token1,
        fee=fee,
        collateral_reserves=CollateralReserves(*collateral),
        debt_reserves=DebtReserves(*debt),
    )


def decode_pool_with_reserves(result: MultiResult | BytesLike) -> PoolWithReserves:
    """Decode a `getPoolReserves` result."""
    return decode_result(result, POOL_WITH_RESERVES_TYPES, _parse_pool_with_reserves)


def _parse_all_pools(decoded: tuple[Any, ...]) -> tuple[Pool, ...]:
    (rows,) = decoded
    return tuple(Pool(address=p, token0=t0, token1=t1, fee=fee) for p, t0, t1, fee in rows)


def decode_all_pools(result: MultiResult | BytesLike) -> tuple[Pool, ...]:
    """Decode a `getAllPools` result."""
    return decode_result(result, ALL_POOLS_TYPES, _parse_all_pools)


# ---------- call builders ----------


def build_reserves_call(resolver: str, pool: str) -> MultiCallParams[PoolWithReserves]:
    return MultiCallParams(
        target=resolver,
        call_data=encode_function_call(GET_POOL_RESERVES, [pool]),
        decode_function=decode_pool_with_reserves,
    )


def build_all_pools_call(resolver: str) -> MultiCallParams[tuple[Pool, ...]]:
    return MultiCallParams(
        target=resolver,
        call_data=encode_function_call(GET_ALL_POOLS),
        decode_function=decode_all_pools,
    )


# ---------- regeneration ----------


async def fetch_pool_reserves(
    multi_wrapper: MultiWrapper,
    resolver: str,
    pool: str,
    block_number: int,
    *,
    batch_size: int | None = None,
) -> PoolWithReserves:
    """Read one pool's reserves from the resolver at `block_number`."""
    (result,) = await multi_wrapper.aggregate(
        [build_reserves_call(resolver, pool)], block_number, batch_size
    )
    return result


async def generate_pool_reserves(
    multi_wrapper: MultiWrapper,
    resolver: str,
    pool: str,
    block_number: int,
    *,
    batch_size: int | None = None,
) -> PoolReserves:
    """Build the reserve snapshot of `pool` at `block_number`."""
    result = await fetch_pool_reserves(
        multi_wrapper, resolver, pool, block_number, batch_size=batch_size
    )
    logger.debug(f"regenerated reserves of {pool} at block {block_number}")
    return result.to_snapshot()


async def fetch_all_pools(
    multi_wrapper: MultiWrapper,
    resolver: str,
    block_number: int,
    *,
    batch_size: int | None = None,
) -> tuple[Pool, ...]:
    """List every pool known to the resolver at `block_number`."""
    (pools,) = await multi_wrapper.aggregate([build_all_pools_call(resolver)], block_number, batch_size)
    return pools
