"""Timing and memory helpers."""
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator

import psutil

logger = logging.getLogger(__name__)

# Fraction of available system memory a single grid may claim
MEMORY_LIMIT_FRACTION = 0.5


@contextmanager
def timing_context(label: str, log: logging.Logger = None,
                   level: int = logging.DEBUG) -> Iterator[Dict[str, float]]:
    """Measure the wall time of a block.
    
    Yields a dict whose ``elapsed`` key is filled in (seconds) when the
    block exits, and logs the duration at ``level``.
    """
    timing = {'elapsed': 0.0}
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing['elapsed'] = time.perf_counter() - start
        (log or logger).log(level, f"{label} took {timing['elapsed'] * 1000:.2f}ms")


def available_memory() -> int:
    """Bytes of system memory currently available."""
    return psutil.virtual_memory().available


def memory_budget(fraction: float = MEMORY_LIMIT_FRACTION) -> int:
    """Bytes a single allocation is allowed to use."""
    return int(available_memory() * fraction)
