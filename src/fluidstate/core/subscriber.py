"""Stateful event subscriber: log routing on top of a versioned state store.

`StatefulEventSubscriber` implements `SynchronizableStateSource`:

- `process_log` decodes a log against the subscriber's registry and routes
  the typed event to `handle_event`. A log that matches a known topic0 but
  not its layout is logged and ignored; unknown events are ignored silently.
- `get_state_or_generate` serves cached versions and falls back to
  `generate_state` (committing the result unless `readonly`).

Concrete subscribers provide `handle_event` and `generate_state`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from fluidstate.core.models import EventLog
from fluidstate.core.store import StateStore
from fluidstate.decoding.decoder import decode_log
from fluidstate.decoding.events import FluidEvent, to_fluid_event
from fluidstate.decoding.specs import EventRegistry
from fluidstate.errors import DecodeError

S = TypeVar("S")


class StatefulEventSubscriber(ABC, Generic[S]):
    """Base class for subscribers keeping one piece of state per block height."""

    def __init__(
        self,
        parent_name: str,
        name: str,
        *,
        registry: EventRegistry,
        max_versions: int | None = None,
    ) -> None:
        self.parent_name = parent_name
        self.name = name
        self.registry = registry
        self.store: StateStore[S] = StateStore(max_versions=max_versions)
        self.addresses_subscribed: list[str] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ---- state ----

    def get_state(self, block_number: int) -> S | None:
        return self.store.get_state(block_number)

    def set_state(self, state: S, block_number: int) -> None:
        self.store.set_state(state, block_number)
        self.logger.info(f"{self.name}: committed state at block {block_number}")

    async def get_state_or_generate(self, block_number: int, readonly: bool = False) -> S:
        """Return the cached state at `block_number`, regenerating it if absent."""
        state = self.get_state(block_number)
        if state is None:
            state = await self.generate_state(block_number)
            if not readonly:
                self.set_state(state, block_number)
        return state

    # ---- events ----

    async def process_log(self, state: S | None, log: EventLog) -> S | None:
        """Apply one log; return the new state or None when nothing changed."""
        try:
            parsed = decode_log(log, self.registry)
        except DecodeError as e:
            self.logger.warning(
                f"{self.name}: skipping undecodable log "
                f"(block={log.block_number}, tx={log.tx_hash}, index={log.log_index}): {e}"
            )
            return None
        if parsed is None:
            return None
        return await self.handle_event(to_fluid_event(parsed), state, log)

    @abstractmethod
    async def handle_event(self, event: FluidEvent, state: S | None, log: EventLog) -> S | None:
        """Route one typed event; return the new state or None."""

    @abstractmethod
    async def generate_state(self, block_number: int) -> S:
        """Rebuild the state from chain reads pinned at `block_number`."""
