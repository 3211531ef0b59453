"""
Process record scheduled by the MLFQ scheduler.

Processes are created by the caller and handed to the scheduler; the
scheduler mutates them in place during dispatch and boost.
"""

from __future__ import annotations


class Process:
    """A unit of work with a fixed amount of CPU time left to run."""

    __slots__ = (
        "pid",  # Caller-assigned identifier; never validated for uniqueness.
        "name",  # Label used in traces and stats output.
        "priority",  # Tier index the process belongs (or last belonged) to.
        "remaining_time",  # Work units left before completion.
        "total_executed_time",  # Work units consumed so far.
        "dispatch_count",  # Number of times execute_process() picked it.
        "demotion_count",  # Number of times it moved to a lower tier.
        "boost_count",  # Number of times priority_boost() moved it to tier 0.
    )

    def __init__(
        self,
        pid: int,
        remaining_time: int,
        priority: int = 0,
        total_executed_time: int = 0,
        name: str = "",
    ) -> None:
        if remaining_time < 0:
            raise ValueError("remaining_time must be >= 0")
        if total_executed_time < 0:
            raise ValueError("total_executed_time must be >= 0")

        self.pid = pid
        self.name = name or f"P{pid}"
        self.priority = priority
        self.remaining_time = remaining_time
        self.total_executed_time = total_executed_time
        self.dispatch_count: int = 0
        self.demotion_count: int = 0
        self.boost_count: int = 0

    @property
    def id(self) -> int:
        return self.pid

    @property
    def is_finished(self) -> bool:
        return self.remaining_time == 0

    @property
    def total_work(self) -> int:
        """Work conserved across dispatches: remaining + executed."""
        return self.remaining_time + self.total_executed_time

    def run_for(self, quantum: int) -> int:
        """Consume up to ``quantum`` units of work and return the amount used."""
        executed = min(self.remaining_time, quantum)
        self.remaining_time -= executed
        self.total_executed_time += executed
        self.dispatch_count += 1
        return executed

    def __repr__(self) -> str:
        return (
            f"Process {{ id: {self.pid}, priority: {self.priority}, "
            f"remaining_time: {self.remaining_time}, "
            f"total_executed_time: {self.total_executed_time} }}"
        )
