from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import assert_never

from eth_utils import to_checksum_address

from fluidstate.clients.multicall import MultiWrapper
from fluidstate.core.config import CommonAddresses
from fluidstate.core.interfaces import IContractCaller
from fluidstate.core.models import EventLog, Pool
from fluidstate.core.subscriber import StatefulEventSubscriber
from fluidstate.decoding.events import FluidEvent, LogDexDeployed, LogOperate, UnknownEvent
from fluidstate.decoding.registries import make_dex_factory_registry
from fluidstate.dex.resolver import fetch_all_pools

Pools = tuple[Pool, ...]


def merge_pools(known: Iterable[Pool], fetched: Iterable[Pool]) -> Pools:
    """Union of two pool lists keyed by address, in first-seen order."""
    out: dict[str, Pool] = {}
    for p in (*known, *fetched):
        out.setdefault(p.address, p)
    return tuple(out.values())


class FluidDexFactory(StatefulEventSubscriber[Pools]):
    """Set of deployed dex pools, refreshed on every `LogDexDeployed`.

    The discovered set only grows: every regeneration is merged into the
    latest committed set, whether it comes from `get_state_or_generate` or
    from a `LogDexDeployed`, and `on_pools_changed` is called with the merged
    list after each deployment.
    """

    def __init__(
        self,
        parent_name: str,
        common_addresses: CommonAddresses,
        *,
        chain: IContractCaller,
        multi_wrapper: MultiWrapper,
        on_pools_changed: Callable[[Pools], None] | None = None,
        batch_size: int | None = None,
        max_versions: int | None = None,
    ) -> None:
        super().__init__(
            parent_name,
            f"{parent_name}_factory",
            registry=make_dex_factory_registry(),
            max_versions=max_versions,
        )
        self.common_addresses = common_addresses
        self.chain = chain
        self.multi_wrapper = multi_wrapper
        self.on_pools_changed = on_pools_changed
        self.batch_size = batch_size
        self.addresses_subscribed = [to_checksum_address(common_addresses.dex_factory)]

    async def handle_event(self, event: FluidEvent, state: Pools | None, log: EventLog) -> Pools | None:
        match event:
            case LogDexDeployed():
                return await self.handle_dex_deployed(event, state, log)
            case LogOperate() | UnknownEvent():
                return None
            case _:
                assert_never(event)

    async def handle_dex_deployed(
        self, event: LogDexDeployed, state: Pools | None, log: EventLog
    ) -> Pools:
        block_number = await self.chain.latest_block()
        pools = merge_pools(state or (), await self.generate_state(block_number))
        self.set_state(pools, block_number)
        self.logger.info(f"{self.name}: dex #{event.dex_id} deployed at {event.dex}, {len(pools)} pools known")
        if self.on_pools_changed is not None:
            self.on_pools_changed(pools)
        return pools

    async def generate_state(self, block_number: int) -> Pools:
        """List the resolver's pools at `block_number`, merged into the latest committed set."""
        latest = self.store.latest()
        fetched = await fetch_all_pools(
            self.multi_wrapper,
            self.common_addresses.resolver,
            block_number,
            batch_size=self.batch_size,
        )
        return merge_pools(latest.state if latest is not None else (), fetched)
