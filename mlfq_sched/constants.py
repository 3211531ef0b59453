"""
MLFQ scheduler constants and policy selectors.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Boost trigger
# ---------------------------------------------------------------------------
# update_time() boosts whenever current_time lands on a multiple of this.
BOOST_INTERVAL: int = 100

# ---------------------------------------------------------------------------
# Default tier table (3 levels, quantum doubles per level)
# ---------------------------------------------------------------------------
DEFAULT_NUM_LEVELS: int = 3
DEFAULT_TIME_QUANTA: tuple[int, ...] = (2, 4, 8)

# Driver defaults
DEFAULT_TICK: int = 100
DEFAULT_MAX_DISPATCHES: int = 100_000

TOP_TIER: int = 0


class DispatchOrder(str, Enum):
    """Which end of a tier execute_process() takes the next process from."""

    LIFO = "lifo"  # most recently queued first
    FIFO = "fifo"  # oldest queued first


class LowestTierPolicy(str, Enum):
    """What happens to an unfinished process after a lowest-tier quantum."""

    DROP = "drop"  # discarded from tracking
    REQUEUE = "requeue"  # back to the tail of the lowest tier
