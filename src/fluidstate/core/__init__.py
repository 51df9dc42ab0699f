"""Core data models, configuration, interfaces and the state store.

This package provides:
- Data models (EventLog, Pool, PoolReserves, StateVersion, ...)
- Configuration classes (CommonAddresses, FluidDexConfig)
- The versioned StateStore
- `Uint256` checked arithmetic
"""

from fluidstate.core.config import CommonAddresses, FluidDexConfig
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

__all__ = [
    "CommonAddresses",
    "FluidDexConfig",
    "CollateralReserves",
    "DebtReserves",
    "EventLog",
    "Pool",
    "PoolReserves",
    "PoolWithReserves",
    "StateVersion",
    "StateStore",
    "Uint256",
]
