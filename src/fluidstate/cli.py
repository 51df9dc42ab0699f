import asyncio
import logging
from dataclasses import fields
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fluidstate.constants import (
    DEFAULT_BATCH_SIZE,
    MAINNET_DEX_FACTORY,
    MAINNET_LIQUIDITY_PROXY,
    MULTICALL3_ADDRESS,
)
from fluidstate.core.config import CommonAddresses, FluidDexConfig
from fluidstate.core.models import PoolReserves
from fluidstate.errors import FluidStateError

console = Console()


def _block_arg(value: str) -> int | str:
    return "latest" if value.lower() == "latest" else int(value)


def _reserves_table(title: str, snapshot: PoolReserves) -> Table:
    table = Table(title=title)
    table.add_column("field")
    table.add_column("value", justify="right")
    table.add_row("fee", str(snapshot.fee))
    for side, prefix in ((snapshot.collateral_reserves, "collateral"), (snapshot.debt_reserves, "debt")):
        for f in fields(side):
            table.add_row(f"{prefix}.{f.name}", f"{getattr(side, f.name):,}")
    return table


def _run(coro):
    try:
        return asyncio.run(coro)
    except FluidStateError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e


@click.group()
@click.option("--rpc", "rpc_url", envvar="FLUIDSTATE_RPC_URL", required=True, help="RPC endpoint URL")
@click.option("--resolver", envvar="FLUIDSTATE_RESOLVER", required=True, help="Dex resolver address")
@click.option("--liquidity", envvar="FLUIDSTATE_LIQUIDITY", default=MAINNET_LIQUIDITY_PROXY, show_default=True)
@click.option("--factory", envvar="FLUIDSTATE_FACTORY", default=MAINNET_DEX_FACTORY, show_default=True)
@click.option("--multicall", envvar="FLUIDSTATE_MULTICALL", default=MULTICALL3_ADDRESS, show_default=True)
@click.option("--batch-size", type=int, default=DEFAULT_BATCH_SIZE, show_default=True, help="Calls per multicall")
@click.option("--concurrency", type=int, default=4, show_default=True, help="Max parallel multicall batches")
@click.option("--step", type=int, default=2_000, show_default=True, help="Blocks per eth_getLogs request")
@click.option("--log-level", default="WARNING", show_default=True)
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: str,
    resolver: str,
    liquidity: str,
    factory: str,
    multicall: str,
    batch_size: int,
    concurrency: int,
    step: int,
    log_level: str,
) -> None:
    """Block-versioned reserve snapshots of Fluid dex pools."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    ctx.obj = FluidDexConfig(
        rpc_url=rpc_url,
        common_addresses=CommonAddresses(
            resolver=resolver,
            liquidity_proxy=liquidity,
            dex_factory=factory,
        ),
        multicall_address=multicall,
        batch_size=batch_size,
        concurrency=concurrency,
        log_step=step,
    )


@cli.command("snapshot")
@click.argument("pool")
@click.option("--block", default="latest", show_default=True, help="Block number or 'latest'")
@click.pass_obj
def snapshot_cmd(config: FluidDexConfig, pool: str, block: str) -> None:
    """Read POOL's reserves at a block."""
    from fluidstate.orchestration.orchestrator import snapshot_pool

    version = _run(snapshot_pool(config, pool, _block_arg(block)))
    console.print(_reserves_table(f"{pool} @ {version.block_number:,}", version.state))


@cli.command("replay")
@click.argument("pool")
@click.option("--from-block", type=int, required=True)
@click.option("--to-block", default="latest", show_default=True, help="Block number or 'latest'")
@click.option("--out", type=click.Path(path_type=Path), default=None, help="Write committed snapshots to Parquet")
@click.pass_obj
def replay_cmd(config: FluidDexConfig, pool: str, from_block: int, to_block: str, out: Path | None) -> None:
    """Replay LogOperate events for POOL and show every committed snapshot."""
    from fluidstate.orchestration.orchestrator import replay_pool

    output = _run(replay_pool(config, pool, from_block=from_block, to_block=_block_arg(to_block)))

    table = Table(title=f"{pool} versions")
    table.add_column("block", justify="right")
    table.add_column("fee", justify="right")
    table.add_column("collateral t0 real", justify="right")
    table.add_column("collateral t1 real", justify="right")
    table.add_column("debt t0", justify="right")
    table.add_column("debt t1", justify="right")
    for v in output.versions:
        s = v.state
        table.add_row(
            f"{v.block_number:,}",
            str(s.fee),
            f"{s.collateral_reserves.token0_real_reserves:,}",
            f"{s.collateral_reserves.token1_real_reserves:,}",
            f"{s.debt_reserves.token0_debt:,}",
            f"{s.debt_reserves.token1_debt:,}",
        )
    console.print(table)
    console.print(
        f"[bold]done[/]: {output.stats.logs} logs • "
        f"[green]updates[/]={output.stats.updates} • chunks={output.stats.chunks}"
    )

    if out is not None:
        from fluidstate.storage.snapshots import write_snapshots

        path = write_snapshots(out, output.versions)
        console.print(f"wrote → {path}  (rows={len(output.versions)})")


@cli.command("pools")
@click.option("--block", default="latest", show_default=True, help="Block number or 'latest'")
@click.pass_obj
def pools_cmd(config: FluidDexConfig, block: str) -> None:
    """List every pool known to the resolver."""
    from fluidstate.orchestration.orchestrator import discover_pools

    pools = _run(discover_pools(config, _block_arg(block)))
    table = Table(title=f"{len(pools)} pools")
    table.add_column("pool")
    table.add_column("token0")
    table.add_column("token1")
    table.add_column("fee", justify="right")
    for p in pools:
        table.add_row(p.address, p.token0, p.token1, str(p.fee))
    console.print(table)


if __name__ == "__main__":
    cli()
