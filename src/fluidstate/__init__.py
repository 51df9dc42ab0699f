from __future__ import annotations

from fluidstate.clients.multicall import MultiCallParams, MultiWrapper
from fluidstate.core.config import CommonAddresses, FluidDexConfig
from fluidstate.core.interfaces import SynchronizableStateSource
from fluidstate.core.models import (
    CollateralReserves,
    DebtReserves,
    EventLog,
    Pool,
    PoolReserves,
    PoolWithReserves,
    StateVersion,
)
from fluidstate.core.store import StateStore
from fluidstate.core.uint import Uint256
from fluidstate.dex.factory import FluidDexFactory
from fluidstate.dex.pool import FluidDexEventPool
from fluidstate.errors import CallFailedError, DecodeError, FluidStateError, RPCError, TransportError

__all__ = [
    "MultiCallParams",
    "MultiWrapper",
    "CommonAddresses",
    "FluidDexConfig",
    "SynchronizableStateSource",
    "CollateralReserves",
    "DebtReserves",
    "EventLog",
    "Pool",
    "PoolReserves",
    "PoolWithReserves",
    "StateVersion",
    "StateStore",
    "Uint256",
    "FluidDexFactory",
    "FluidDexEventPool",
    "CallFailedError",
    "DecodeError",
    "FluidStateError",
    "RPCError",
    "TransportError",
]
