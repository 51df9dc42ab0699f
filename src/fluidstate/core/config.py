from __future__ import annotations

from dataclasses import dataclass

from fluidstate.constants import (
    DEFAULT_BATCH_SIZE,
    MAINNET_DEX_FACTORY,
    MAINNET_LIQUIDITY_PROXY,
    MULTICALL3_ADDRESS,
)


@dataclass(frozen=True)
class CommonAddresses:
    """Contract addresses shared by every pool of one deployment."""

    resolver: str
    liquidity_proxy: str = MAINNET_LIQUIDITY_PROXY
    dex_factory: str = MAINNET_DEX_FACTORY


@dataclass(frozen=True)
class FluidDexConfig:
    """Configuration for wiring RPC, multicall and subscribers."""

    rpc_url: str
    common_addresses: CommonAddresses
    multicall_address: str = MULTICALL3_ADDRESS
    batch_size: int = DEFAULT_BATCH_SIZE
    concurrency: int = 4  # parallel multicall batches
    timeout_s: int = 20
    log_step: int = 2_000  # blocks per eth_getLogs request during replay
