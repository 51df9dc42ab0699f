from __future__ import annotations

from typing import assert_never

from eth_utils import to_checksum_address

from fluidstate.clients.multicall import MultiWrapper
from fluidstate.core.config import CommonAddresses
from fluidstate.core.interfaces import IContractCaller
from fluidstate.core.models import EventLog, PoolReserves
from fluidstate.core.subscriber import StatefulEventSubscriber
from fluidstate.decoding.events import FluidEvent, LogDexDeployed, LogOperate, UnknownEvent
from fluidstate.decoding.registries import make_liquidity_registry
from fluidstate.decoding.utils import same_address
from fluidstate.dex.resolver import generate_pool_reserves


class FluidDexEventPool(StatefulEventSubscriber[PoolReserves]):
    """Reserve snapshot of one dex pool, kept in sync with liquidity-layer events.

    Every `LogOperate` emitted on behalf of the pool triggers a full re-read
    of the pool's reserves from the resolver instead of applying the event's
    deltas.
    """

    def __init__(
        self,
        parent_name: str,
        pool: str,
        common_addresses: CommonAddresses,
        *,
        chain: IContractCaller,
        multi_wrapper: MultiWrapper,
        batch_size: int | None = None,
        max_versions: int | None = None,
    ) -> None:
        pool = to_checksum_address(pool)
        super().__init__(
            parent_name,
            f"{parent_name}_{pool}",
            registry=make_liquidity_registry(),
            max_versions=max_versions,
        )
        self.pool = pool
        self.common_addresses = common_addresses
        self.chain = chain
        self.multi_wrapper = multi_wrapper
        self.batch_size = batch_size
        self.addresses_subscribed = [to_checksum_address(common_addresses.liquidity_proxy)]

    async def handle_event(
        self, event: FluidEvent, state: PoolReserves | None, log: EventLog
    ) -> PoolReserves | None:
        match event:
            case LogOperate():
                return await self.handle_operate(event, state, log)
            case LogDexDeployed() | UnknownEvent():
                return None
            case _:
                assert_never(event)

    async def handle_operate(
        self, event: LogOperate, state: PoolReserves | None, log: EventLog
    ) -> PoolReserves | None:
        """Re-read the pool's reserves after it operated on the liquidity layer."""
        if not same_address(event.user, self.pool):
            return None

        block_number = await self.chain.latest_block()
        new_state = await self.generate_state(block_number)
        self.set_state(new_state, block_number)
        return new_state

    async def generate_state(self, block_number: int) -> PoolReserves:
        return await generate_pool_reserves(
            self.multi_wrapper,
            self.common_addresses.resolver,
            self.pool,
            block_number,
            batch_size=self.batch_size,
        )
