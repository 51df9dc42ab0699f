"""Versioned state store: at most one committed state per block height.

The store is a keyed cache, not a sequence. Commits are ordered by the
`set_state` calls actually made; a later commit for any height is recorded
even if a higher height was committed before it.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from fluidstate.core.models import StateVersion

S = TypeVar("S")


class StateStore(Generic[S]):
    """In-memory store of committed state versions keyed by block height.

    Parameters
    ----------
    max_versions : int | None
        When set, the lowest heights are evicted once more than
        `max_versions` heights are held. Unbounded by default.
    """

    def __init__(self, *, max_versions: int | None = None) -> None:
        if max_versions is not None and max_versions < 1:
            raise ValueError("max_versions must be >= 1")
        self.max_versions = max_versions
        self._versions: dict[int, StateVersion[S]] = {}
        self._latest: StateVersion[S] | None = None

    def get_state(self, block_number: int) -> S | None:
        """Return the state committed at exactly `block_number`, if any."""
        version = self._versions.get(block_number)
        return None if version is None else version.state

    def set_state(self, state: S, block_number: int) -> StateVersion[S]:
        """Commit `state` at `block_number` (last write wins)."""
        version = StateVersion(block_number=block_number, state=state)
        self._versions[block_number] = version
        self._latest = version
        self._evict()
        return version

    def latest(self) -> StateVersion[S] | None:
        """Return the most recently committed version (by commit order)."""
        return self._latest

    def heights(self) -> list[int]:
        return sorted(self._versions)

    def versions(self) -> list[StateVersion[S]]:
        """Committed versions ordered by block height."""
        return [self._versions[h] for h in self.heights()]

    def _evict(self) -> None:
        if self.max_versions is None:
            return
        while len(self._versions) > self.max_versions:
            del self._versions[min(self._versions)]

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, block_number: object) -> bool:
        return block_number in self._versions

    def __iter__(self) -> Iterator[StateVersion[S]]:
        return iter(self.versions())
