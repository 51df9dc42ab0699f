"""Parquet export of committed reserve snapshots.

Design notes
------------
- uint256 quantities are stored as decimal strings to avoid Arrow overflow
  and preserve exactness.
- Rows are sorted by block number before write.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import fields
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from fluidstate.core.models import CollateralReserves, DebtReserves, PoolReserves, StateVersion

_COLLATERAL_COLUMNS = [f"collateral_{f.name}" for f in fields(CollateralReserves)]
_DEBT_COLUMNS = [f"debt_{f.name}" for f in fields(DebtReserves)]


def snapshot_schema() -> pa.Schema:
    return pa.schema(
        [pa.field("block_number", pa.uint64()), pa.field("fee", pa.string())]
        + [pa.field(name, pa.string()) for name in _COLLATERAL_COLUMNS + _DEBT_COLUMNS]
    )


def versions_to_arrow_table(versions: Iterable[StateVersion[PoolReserves]]) -> pa.Table:
    """Convert committed versions to an Arrow table with a deterministic schema."""
    cols: dict[str, list] = {name: [] for name in snapshot_schema().names}
    for v in sorted(versions, key=lambda v: v.block_number):
        s = v.state
        cols["block_number"].append(v.block_number)
        cols["fee"].append(str(s.fee))
        for f in fields(CollateralReserves):
            cols[f"collateral_{f.name}"].append(str(getattr(s.collateral_reserves, f.name)))
        for f in fields(DebtReserves):
            cols[f"debt_{f.name}"].append(str(getattr(s.debt_reserves, f.name)))
    return pa.Table.from_pydict(cols, schema=snapshot_schema())


def write_snapshots(
    path: Path,
    versions: Iterable[StateVersion[PoolReserves]],
    *,
    codec: str = "zstd",
) -> Path:
    """Write versions to a single Parquet file and return its path."""
    table = versions_to_arrow_table(versions)
    path.parent.mkdir(exist_ok=True, parents=True)
    pq.write_table(table, path.as_posix(), compression=codec)
    return path
