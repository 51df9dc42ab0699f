import asyncio
import os
from pathlib import Path

import pyarrow.parquet as pq

from fluidstate.core.config import CommonAddresses, FluidDexConfig
from fluidstate.orchestration.orchestrator import discover_pools, replay_pool
from fluidstate.storage.snapshots import write_snapshots

EXAMPLES_ROOT = Path(__file__).parent
assert EXAMPLES_ROOT.name == "examples"
OUT_ROOT = EXAMPLES_ROOT.parent / "data_examples"

config = FluidDexConfig(
    rpc_url=os.environ.get("FLUIDSTATE_RPC_URL", "https://ethereum-rpc.publicnode.com"),
    common_addresses=CommonAddresses(resolver=os.environ["FLUIDSTATE_RESOLVER"]),
    log_step=1_000,
)

START_BLOCK = 21091850  # first LogOperate of the window
END_BLOCK = 21092383


async def main():
    pools = await discover_pools(config, START_BLOCK)
    print(f"{len(pools)} pools at block {START_BLOCK}")
    pool = pools[0]
    print(pool)

    output = await replay_pool(config, pool.address, from_block=START_BLOCK, to_block=END_BLOCK)
    print(output.stats)

    path = write_snapshots(OUT_ROOT / f"{pool.address}.parquet", output.versions)
    table = pq.read_table(path)
    print(table.num_rows)
    print(table.column_names)
    print(table.slice(0, 1).to_pylist())


asyncio.run(main())
