"""Fluid dex subscribers and resolver reads.

This package provides:
- `FluidDexEventPool`: reserve snapshot of one pool, refreshed on LogOperate
- `FluidDexFactory`: growing set of deployed pools, refreshed on LogDexDeployed
- Resolver call builders, decoders and regeneration helpers
"""

from fluidstate.dex.factory import FluidDexFactory, merge_pools
from fluidstate.dex.pool import FluidDexEventPool
from fluidstate.dex.resolver import (
    decode_all_pools,
    decode_pool_with_reserves,
    fetch_all_pools,
    fetch_pool_reserves,
    generate_pool_reserves,
)

__all__ = [
    "FluidDexFactory",
    "merge_pools",
    "FluidDexEventPool",
    "decode_all_pools",
    "decode_pool_with_reserves",
    "fetch_all_pools",
    "fetch_pool_reserves",
    "generate_pool_reserves",
]
