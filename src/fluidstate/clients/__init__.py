"""Chain access: JSON-RPC transport and Multicall3 batch aggregation."""

from fluidstate.clients.multicall import MultiCallParams, MultiWrapper
from fluidstate.clients.rpc import RPC

__all__ = ["MultiCallParams", "MultiWrapper", "RPC"]
