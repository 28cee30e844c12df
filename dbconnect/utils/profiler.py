"""
Timing helpers for dbconnect.

The CLI uses `profile_block` to report how long a connector took to open and
ping its backend.

Usage:
    from dbconnect.utils.profiler import profile_block

    with profile_block("redis") as stats:
        client = new_redis_connection("localhost:6379")

    print(stats.duration_ms)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator


@dataclass
class ProfileStats:
    """
    Container for timing measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return self.duration_seconds * 1000.0


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager measuring the wall-clock duration of a block.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.

    Notes
    -----
    Stats are filled in even when the block raises, including SystemExit
    raised by a failing connector.
    """
    stats = ProfileStats(label=label)
    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts


__all__ = ["ProfileStats", "profile_block"]
