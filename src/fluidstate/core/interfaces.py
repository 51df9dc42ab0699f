from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

from fluidstate.core.models import EventLog

S = TypeVar("S")


# ---------------------------------------------------------------------------
# IEvmLogsProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class IEvmLogsProvider(Protocol):
    """
    Abstract provider for fetching EVM logs.

    Domain expectations:
    - It returns EventLog objects already mapped into internal domain models.
    - It hides the underlying RPC / DB / archive technology.
    """

    async def get_logs(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Return all logs for (address, topic0s) over the inclusive block range.

        An empty `topic0s` matches every event emitted by `address`.
        """
        ...

    async def latest_block(self) -> int:
        """Return the current chain head height."""
        ...


# ---------------------------------------------------------------------------
# IContractCaller
# ---------------------------------------------------------------------------

@runtime_checkable
class IContractCaller(Protocol):
    """
    Read-only contract call transport.

    Domain expectations:
    - `call` executes at exactly `block_number`; no "latest" shortcut.
    - Failures are raised as TransportError, never returned.
    """

    async def call(self, *, to: str, data: bytes, block_number: int) -> bytes:
        """Execute an `eth_call` and return the raw return data."""
        ...

    async def latest_block(self) -> int:
        """Return the current chain head height."""
        ...


# ---------------------------------------------------------------------------
# SynchronizableStateSource
# ---------------------------------------------------------------------------

@runtime_checkable
class SynchronizableStateSource(Protocol[S]):
    """
    The contract a host uses to keep a piece of on-chain state in sync.

    The host:
    - offers every log emitted by `addresses_subscribed` to `process_log`,
      one at a time and in chain order;
    - calls `generate_state` on cold start or whenever it considers the
      event-derived state unreliable.
    """

    addresses_subscribed: list[str]

    async def process_log(self, state: S | None, log: EventLog) -> S | None:
        """Apply one log. Return the new state, or None when nothing changed."""
        ...

    async def generate_state(self, block_number: int) -> S:
        """Rebuild the state from chain reads pinned at `block_number`."""
        ...
