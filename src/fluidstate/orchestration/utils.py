"""Block-range helpers for chunked log fetching."""

from __future__ import annotations

from collections.abc import Iterator


def iter_chunks(start: int, end: int, step: int) -> Iterator[tuple[int, int]]:
    """Split the inclusive range [start, end] into inclusive windows of `step` blocks."""
    if step < 1:
        raise ValueError("step must be >= 1")
    for lo in range(start, end + 1, step):
        yield lo, min(end, lo + step - 1)
