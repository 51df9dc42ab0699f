import os

import pytest

from fluidstate.clients.multicall import MultiWrapper
from fluidstate.core.config import CommonAddresses
from fluidstate.core.models import CollateralReserves, DebtReserves, EventLog, PoolReserves
from fluidstate.core.use_cases.replay import ReplayHead, replay_logs
from fluidstate.decoding.specs import get_event_registry_topic0s
from fluidstate.dex.pool import FluidDexEventPool
from fluidstate.orchestration.utils import iter_chunks

from .fakes import OTHER_POOL, POOL, FakeChain, make_operate_log, reserves_row

# Blocks with a LogOperate for the wstETH/ETH dex on mainnet.
OPERATE_BLOCKS = [
    21091850, 21091882, 21091897, 21091915, 21092008, 21092022, 21092039,
    21092142, 21092176, 21092187, 21092230, 21092286, 21092289, 21092295,
    21092319, 21092352, 21092360, 21092368, 21092378, 21092383,
]


class CountingSource:
    """Minimal state source: state is the number of "0xaa" logs seen."""

    def __init__(self, addresses: list[str]) -> None:
        self.addresses_subscribed = addresses
        self.seen: list[tuple[int, int]] = []

    async def process_log(self, state: int | None, log: EventLog) -> int | None:
        self.seen.append((log.block_number, log.log_index))
        if log.topics[0] != "0xaa":
            return None
        return (state or 0) + 1

    async def generate_state(self, block_number: int) -> int:
        return 0


def _log(address: str, topic0: str, block_number: int, log_index: int) -> EventLog:
    return EventLog(address, (topic0,), "0x", block_number, "0x", log_index)


def test_iter_chunks():
    assert list(iter_chunks(0, 9, 4)) == [(0, 3), (4, 7), (8, 9)]
    assert list(iter_chunks(5, 5, 100)) == [(5, 5)]
    with pytest.raises(ValueError):
        list(iter_chunks(0, 1, 0))


@pytest.mark.asyncio
async def test_replay_orders_logs_across_addresses():
    a, b = "0x" + "0a" * 20, "0x" + "0b" * 20
    chain = FakeChain(
        logs=[
            _log(b, "0xaa", 12, 1),
            _log(a, "0xaa", 12, 0),
            _log(a, "0xbb", 3, 5),
            _log(b, "0xaa", 3, 2),
        ]
    )
    source = CountingSource([a, b])

    result = await replay_logs(source, chain, from_block=0, to_block=19, step=10, initial_state=5)

    assert source.seen == [(3, 2), (3, 5), (12, 0), (12, 1)]
    assert result.state == 8
    assert result.stats.logs == 4
    assert result.stats.updates == 3
    assert result.stats.chunks == 4  # 2 ranges x 2 addresses
    assert result.stats.last_block == 12


@pytest.mark.asyncio
async def test_replay_filters_topics_and_range():
    a = "0x" + "0a" * 20
    chain = FakeChain(logs=[_log(a, "0xaa", 5, 0), _log(a, "0xbb", 6, 0), _log(a, "0xaa", 50, 0)])
    source = CountingSource([a])

    result = await replay_logs(source, chain, from_block=0, to_block=10, step=100, topic0s=["0xbb"])

    assert source.seen == [(6, 0)]
    assert result.state is None
    assert result.stats.updates == 0
    assert chain.get_logs_calls == [(a, 0, 10)]


@pytest.mark.asyncio
async def test_replay_rejects_inverted_range():
    with pytest.raises(ValueError):
        await replay_logs(CountingSource([]), FakeChain(), from_block=2, to_block=1, step=1)


@pytest.mark.asyncio
async def test_operate_sequence_matches_direct_reads(common_addresses: CommonAddresses):
    """Feeding each LogOperate as the head reaches its block yields the resolver snapshot there."""
    chain = FakeChain()
    pool = FluidDexEventPool(
        "FluidDex", POOL, common_addresses, chain=chain, multi_wrapper=MultiWrapper(chain)
    )

    state = None
    for i, block in enumerate(OPERATE_BLOCKS):
        chain.head = block
        if i % 3 == 0:
            assert await pool.process_log(state, make_operate_log(OTHER_POOL, block, 0)) is None
        new_state = await pool.process_log(state, make_operate_log(POOL, block, 1))
        assert new_state is not None
        state = new_state

        _, _, _, fee, collateral, debt = reserves_row(block)
        expected = PoolReserves(CollateralReserves(*collateral), DebtReserves(*debt), fee)
        assert state == expected
        assert state == await pool.generate_state(block)

    assert pool.store.heights() == OPERATE_BLOCKS
    assert pool.store.latest().block_number == OPERATE_BLOCKS[-1]


@pytest.mark.asyncio
async def test_replay_pool_subscriber(common_addresses: CommonAddresses):
    logs = [make_operate_log(POOL, b, 1) for b in OPERATE_BLOCKS]
    logs += [make_operate_log(OTHER_POOL, b, 0) for b in OPERATE_BLOCKS[::2]]
    chain = FakeChain(head=OPERATE_BLOCKS[-1], logs=logs)
    pool = FluidDexEventPool(
        "FluidDex", POOL, common_addresses, chain=chain, multi_wrapper=MultiWrapper(chain)
    )

    result = await replay_logs(
        pool,
        chain,
        from_block=OPERATE_BLOCKS[0],
        to_block=OPERATE_BLOCKS[-1],
        step=100,
        topic0s=get_event_registry_topic0s(pool.registry),
    )

    assert result.stats.logs == len(logs)
    assert result.stats.updates == len(OPERATE_BLOCKS)
    # every regeneration is pinned to the head observed at handling time
    assert pool.store.heights() == [OPERATE_BLOCKS[-1]]
    assert result.state == pool.get_state(OPERATE_BLOCKS[-1])


@pytest.mark.skipif(
    not (os.environ.get("FLUIDSTATE_RPC_URL") and os.environ.get("FLUIDSTATE_RESOLVER")),
    reason="FLUIDSTATE_RPC_URL and FLUIDSTATE_RESOLVER not set",
)
@pytest.mark.live
@pytest.mark.asyncio
async def test_live_snapshot_matches_resolver():
    from fluidstate.core.config import FluidDexConfig
    from fluidstate.orchestration.orchestrator import discover_pools, snapshot_pool

    config = FluidDexConfig(
        rpc_url=os.environ["FLUIDSTATE_RPC_URL"],
        common_addresses=CommonAddresses(resolver=os.environ["FLUIDSTATE_RESOLVER"]),
    )
    block = OPERATE_BLOCKS[0]
    pools = await discover_pools(config, block)
    assert pools

    first = await snapshot_pool(config, pools[0].address, block)
    again = await snapshot_pool(config, pools[0].address, block)
    assert first == again
    assert first.block_number == block


@pytest.mark.asyncio
async def test_replay_head_pins_each_snapshot_to_its_log(common_addresses: CommonAddresses):
    logs = [make_operate_log(POOL, b, 1) for b in OPERATE_BLOCKS]
    logs += [make_operate_log(OTHER_POOL, b, 0) for b in OPERATE_BLOCKS[::2]]
    chain = FakeChain(head=30_000_000, logs=logs)
    head = ReplayHead(chain)
    pool = FluidDexEventPool(
        "FluidDex", POOL, common_addresses, chain=head, multi_wrapper=MultiWrapper(chain)
    )

    result = await replay_logs(
        pool,
        chain,
        from_block=OPERATE_BLOCKS[0],
        to_block=OPERATE_BLOCKS[-1],
        step=100,
        topic0s=get_event_registry_topic0s(pool.registry),
        head=head,
    )

    assert result.stats.updates == len(OPERATE_BLOCKS)
    assert pool.store.heights() == OPERATE_BLOCKS
    assert [block for _, block, _ in chain.calls] == OPERATE_BLOCKS
    for block in OPERATE_BLOCKS:
        assert pool.get_state(block) == await pool.generate_state(block)
    assert head.block_number == OPERATE_BLOCKS[-1]


@pytest.mark.asyncio
async def test_replay_head_forwards_calls(mock_rpc):
    head = ReplayHead(mock_rpc, 7)
    mock_rpc.call.return_value = b"\x01"

    assert await head.latest_block() == 7
    assert await head.call(to="0x0", data=b"\x02", block_number=7) == b"\x01"
    mock_rpc.call.assert_awaited_once_with(to="0x0", data=b"\x02", block_number=7)
    mock_rpc.latest_block.assert_not_awaited()
