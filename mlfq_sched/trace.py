"""
Execution trace entries emitted by the scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto


class TraceEventType(IntEnum):
    COMPLETE = auto()  # process finished during this dispatch
    DEMOTE = auto()  # unfinished, moved to the next-lower tier
    REQUEUE = auto()  # unfinished at the lowest tier, queued there again
    DROP = auto()  # unfinished at the lowest tier, discarded
    BOOST = auto()  # every lower tier moved back to tier 0


@dataclass(frozen=True)
class TraceRecord:
    """One observable scheduler step."""

    timestamp: int  # scheduler clock after the step
    event_type: TraceEventType
    tier: int = 0
    pid: int = -1
    executed: int = 0
    remaining: int = 0
    next_tier: int = -1  # destination tier for DEMOTE/REQUEUE/BOOST
    moved: int = 0  # BOOST only: number of processes moved

    def describe(self) -> str:
        if self.event_type == TraceEventType.BOOST:
            return f"Priority boost: moved {self.moved} process(es) to Q0"
        msg = (
            f"Executed Process ID: {self.pid}, Time Executed: {self.executed}, "
            f"Time Remaining: {self.remaining}"
        )
        if self.event_type == TraceEventType.DEMOTE:
            msg += f" (demoted Q{self.tier} -> Q{self.next_tier})"
        elif self.event_type == TraceEventType.REQUEUE:
            msg += f" (requeued at Q{self.tier})"
        elif self.event_type == TraceEventType.DROP:
            msg += f" (dropped from Q{self.tier})"
        else:
            msg += " (complete)"
        return msg

    def __str__(self) -> str:
        return f"[t={self.timestamp:>6}] {self.describe()}"
