"""Thread-pool map/merge helpers for the parallel processing paths.

Work is split into disjoint contiguous chunks. Each worker builds its own
local result and never touches shared state; the caller merges the
per-chunk results in chunk order once every worker has finished.
"""

from __future__ import annotations
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


def resolve_threads(threads: Optional[int]) -> int:
    """Return a positive worker count, defaulting to the CPU count."""
    if threads is None:
        return os.cpu_count() or 1
    if threads < 1:
        raise ValueError("threads must be positive")
    return threads


def partition(n_items: int, n_parts: int) -> List[range]:
    """Split ``range(n_items)`` into at most ``n_parts`` contiguous, non-empty chunks.

    Chunk sizes differ by at most one; earlier chunks take the remainder.
    """
    if n_items <= 0:
        return []
    n_parts = max(1, min(n_parts, n_items))
    base, extra = divmod(n_items, n_parts)
    chunks: List[range] = []
    start = 0
    for part in range(n_parts):
        stop = start + base + (1 if part < extra else 0)
        chunks.append(range(start, stop))
        start = stop
    return chunks


def run_partitioned(
    func: Callable[[Sequence[T]], R],
    items: Sequence[T],
    threads: Optional[int] = None,
) -> List[R]:
    """Apply ``func`` to contiguous chunks of ``items`` on a thread pool.

    Returns the per-chunk results in chunk order. An exception raised by
    any worker propagates to the caller unchanged.
    """
    n_threads = resolve_threads(threads)
    chunks = [items[c.start:c.stop] for c in partition(len(items), n_threads)]
    
    if len(chunks) <= 1:
        return [func(chunk) for chunk in chunks]
    
    logger.debug("Dispatching chunks", n_chunks=len(chunks), threads=n_threads, items=len(items))
    with ThreadPoolExecutor(max_workers=n_threads) as executor:
        futures = [executor.submit(func, chunk) for chunk in chunks]
        return [future.result() for future in futures]
