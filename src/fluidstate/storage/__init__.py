"""Storage components for exporting committed snapshots.

This package provides:
- versions_to_arrow_table: committed versions → Arrow table
- write_snapshots: committed versions → Parquet file
"""

from fluidstate.storage.snapshots import versions_to_arrow_table, write_snapshots

__all__ = [
    "versions_to_arrow_table",
    "write_snapshots",
]
