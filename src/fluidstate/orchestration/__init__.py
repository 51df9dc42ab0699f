"""Wiring of concrete clients and subscribers for scripts and the CLI.

This package provides:
- Block-range helpers (`iter_chunks`)
- `orchestrator`: snapshot / replay / discovery helpers built on `RPC`
  and `MultiWrapper` (import it explicitly)
"""

from fluidstate.orchestration.utils import iter_chunks

__all__ = ["iter_chunks"]
