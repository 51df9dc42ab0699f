"""Core data models: raw logs, pool identity and reserve snapshots.

This module defines:
- `EventLog`: minimal RPC log record fed to subscribers.
- `Pool`: pool identity as listed by the resolver.
- `CollateralReserves` / `DebtReserves`: the two reserve sides of a pool.
- `PoolReserves`: the immutable snapshot cached per block height.
- `PoolWithReserves`: one decoded `getPoolReserves` row.
- `StateVersion`: a committed (block height, state) pair.

Design notes
------------
- Every quantity is coerced to `Uint256` on construction, so a snapshot can
  never hold a negative or oversized value.
- Addresses are stored checksummed.
- All models are frozen; a new height always means a new object.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Generic, TypeVar

from eth_utils import to_checksum_address

from fluidstate.core.uint import Uint256

S = TypeVar("S")


def _coerce_uint_fields(obj: object) -> None:
    for f in fields(obj):  # type: ignore[arg-type]
        object.__setattr__(obj, f.name, Uint256(getattr(obj, f.name)))


# === RPC record ===


@dataclass(slots=True, frozen=True)
class EventLog:
    """Raw log as fetched from RPC, minimally normalized."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x...
    log_index: int
    block_timestamp: int | None = None

    def data_bytes(self) -> bytes:
        data_hex = self.data_hex[2:] if self.data_hex.lower().startswith("0x") else self.data_hex
        return bytes.fromhex(data_hex) if data_hex else b""


# === Pool identity ===


@dataclass(frozen=True)
class Pool:
    address: str
    token0: str
    token1: str
    fee: Uint256 = Uint256(0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", to_checksum_address(self.address))
        object.__setattr__(self, "token0", to_checksum_address(self.token0))
        object.__setattr__(self, "token1", to_checksum_address(self.token1))
        object.__setattr__(self, "fee", Uint256(self.fee))


# === Reserve sides ===


@dataclass(frozen=True)
class CollateralReserves:
    """Collateral side: real and imaginary reserves per token."""

    token0_real_reserves: Uint256
    token1_real_reserves: Uint256
    token0_imaginary_reserves: Uint256
    token1_imaginary_reserves: Uint256

    def __post_init__(self) -> None:
        _coerce_uint_fields(self)

    @classmethod
    def empty(cls) -> CollateralReserves:
        return cls(0, 0, 0, 0)


@dataclass(frozen=True)
class DebtReserves:
    """Debt side: per-token debt plus real and imaginary reserves."""

    token0_debt: Uint256
    token1_debt: Uint256
    token0_real_reserves: Uint256
    token1_real_reserves: Uint256
    token0_imaginary_reserves: Uint256
    token1_imaginary_reserves: Uint256

    def __post_init__(self) -> None:
        _coerce_uint_fields(self)

    @classmethod
    def empty(cls) -> DebtReserves:
        return cls(0, 0, 0, 0, 0, 0)


# === Snapshot ===


@dataclass(frozen=True)
class PoolReserves:
    """Point-in-time reserve state of one pool."""

    collateral_reserves: CollateralReserves
    debt_reserves: DebtReserves
    fee: Uint256

    def __post_init__(self) -> None:
        if self.collateral_reserves is None:
            object.__setattr__(self, "collateral_reserves", CollateralReserves.empty())
        if self.debt_reserves is None:
            object.__setattr__(self, "debt_reserves", DebtReserves.empty())
        object.__setattr__(self, "fee", Uint256(self.fee))


@dataclass(frozen=True)
class PoolWithReserves:
    """Decoded `getPoolReserves` result."""

    pool: str
    token0: str
    token1: str
    fee: Uint256
    collateral_reserves: CollateralReserves
    debt_reserves: DebtReserves

    def __post_init__(self) -> None:
        object.__setattr__(self, "pool", to_checksum_address(self.pool))
        object.__setattr__(self, "token0", to_checksum_address(self.token0))
        object.__setattr__(self, "token1", to_checksum_address(self.token1))
        object.__setattr__(self, "fee", Uint256(self.fee))

    def to_pool(self) -> Pool:
        return Pool(address=self.pool, token0=self.token0, token1=self.token1, fee=self.fee)

    def to_snapshot(self) -> PoolReserves:
        return PoolReserves(
            collateral_reserves=self.collateral_reserves,
            debt_reserves=self.debt_reserves,
            fee=self.fee,
        )


# === Versioned state ===


@dataclass(frozen=True)
class StateVersion(Generic[S]):
    """A state committed to the store at one block height."""

    block_number: int
    state: S
