"""Execution support: processing context and thread-pool partitioning."""

from .context import EnsembleContext, configure_logging
from .parallel import partition, run_partitioned, resolve_threads

__all__ = [
    "EnsembleContext",
    "configure_logging",
    "partition",
    "run_partitioned",
    "resolve_threads",
]
