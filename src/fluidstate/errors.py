"""Exception hierarchy shared by the decoding, transport and subscriber layers.

- `DecodeError`: bytes did not match the declared ABI layout
- `TransportError`: the chain could not be read (HTTP, JSON-RPC, short data)
- `RPCError`: the node answered with a JSON-RPC error object
- `CallFailedError`: one call inside a multicall batch reverted
"""

from __future__ import annotations


class FluidStateError(Exception):
    """Base exception for the package."""


class DecodeError(FluidStateError):
    """Raised when raw call or log bytes do not match the declared layout."""


class TransportError(FluidStateError):
    """Raised when a chain read fails or returns unusable data."""


class RPCError(TransportError):
    """JSON-RPC error object returned by the node."""

    def __init__(self, code: int | None, message: str) -> None:
        super().__init__(f"RPC error: {code} {message}")
        self.code = code
        self.message = message


class CallFailedError(TransportError):
    """An individual call inside an aggregate batch reverted."""

    def __init__(self, index: int, target: str) -> None:
        super().__init__(f"call #{index} to {target} reverted")
        self.index = index
        self.target = target
