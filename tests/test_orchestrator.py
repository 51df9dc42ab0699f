from unittest.mock import patch

import pytest

from fluidstate.core.config import CommonAddresses, FluidDexConfig
from fluidstate.core.models import Pool
from fluidstate.errors import CallFailedError
from fluidstate.orchestration.orchestrator import discover_pools, replay_pool, snapshot_pool

from .fakes import POOL, RESOLVER, WETH, WSTETH, FakeChain, make_operate_log, pool_row, reserves_row

CONFIG = FluidDexConfig(
    rpc_url="http://localhost:8545",
    common_addresses=CommonAddresses(resolver=RESOLVER),
    batch_size=10,
    log_step=5,
)


def _patch_rpc(chain: FakeChain):
    return patch("fluidstate.orchestration.orchestrator.RPC", return_value=chain)


@pytest.mark.asyncio
async def test_snapshot_pool_latest():
    chain = FakeChain(head=21_091_850)

    with _patch_rpc(chain):
        version = await snapshot_pool(CONFIG, POOL)

    assert version.block_number == 21_091_850
    assert version.state.fee == reserves_row(21_091_850)[3]
    assert chain.closed


@pytest.mark.asyncio
async def test_snapshot_pool_explicit_block():
    chain = FakeChain(head=21_091_900)

    with _patch_rpc(chain):
        version = await snapshot_pool(CONFIG, POOL, 21_091_850)

    assert version.block_number == 21_091_850
    assert [block for _, block, _ in chain.calls] == [21_091_850]


@pytest.mark.asyncio
async def test_replay_pool_seeds_and_replays():
    chain = FakeChain(head=30_000_000, logs=[make_operate_log(POOL, 105, 0), make_operate_log(POOL, 112, 3)])

    with _patch_rpc(chain):
        output = await replay_pool(CONFIG, POOL, from_block=100, to_block=115)

    assert [v.block_number for v in output.versions] == [99, 105, 112]
    assert [block for _, block, _ in chain.calls] == [99, 105, 112]
    assert output.versions[1].state.fee == reserves_row(105)[3]
    assert output.stats.logs == 2
    assert output.stats.updates == 2
    assert output.stats.chunks == 4  # [100,104] [105,109] [110,114] [115,115]
    assert chain.closed


@pytest.mark.asyncio
async def test_discover_pools():
    chain = FakeChain(head=50, pools=lambda b: [pool_row(POOL)])

    with _patch_rpc(chain):
        pools = await discover_pools(CONFIG)

    assert pools == (Pool(POOL, WSTETH, WETH, 100),)
    assert [block for _, block, _ in chain.calls] == [50]


@pytest.mark.asyncio
async def test_clients_closed_on_error():
    chain = FakeChain(head=50, reserves=lambda b, p: None)

    with _patch_rpc(chain):
        with pytest.raises(CallFailedError):
            await snapshot_pool(CONFIG, POOL)

    assert chain.closed
