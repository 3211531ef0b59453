"""
Statistics collection and reporting for the simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mlfq_sched.trace import TraceEventType, TraceRecord

if TYPE_CHECKING:
    from mlfq_sched.process import Process


OUTCOME_QUEUED = "queued"
OUTCOME_COMPLETE = "complete"
OUTCOME_DROPPED = "dropped"


@dataclass
class ProcessStats:
    """Per-process statistics."""

    pid: int = 0
    name: str = ""
    initial_tier: int = 0
    burst: int = 0

    executed: int = 0
    remaining: int = 0
    dispatches: int = 0
    demotions: int = 0
    boosts: int = 0
    lowest_tier_reached: int = 0
    finish_time: int | None = None
    outcome: str = OUTCOME_QUEUED

    @property
    def is_complete(self) -> bool:
        return self.outcome == OUTCOME_COMPLETE


class StatsCollector:
    """Collects and reports simulation statistics."""

    __slots__ = (
        "process_stats",
        "num_levels",
        "tier_dispatches",
        "tier_executed",
        "boost_count",
        "boost_moves",
        "idle_boosts",
        "simulation_duration",
        "rounds",
    )

    def __init__(self, num_levels: int) -> None:
        self.process_stats: dict[int, ProcessStats] = {}
        self.num_levels = num_levels
        self.tier_dispatches: list[int] = [0] * num_levels
        self.tier_executed: list[int] = [0] * num_levels
        self.boost_count: int = 0
        self.boost_moves: int = 0
        self.idle_boosts: int = 0  # boosts that moved nothing
        self.simulation_duration: int = 0
        self.rounds: int = 0

    def register_process(self, process: Process, tier: int) -> None:
        self.process_stats[process.pid] = ProcessStats(
            pid=process.pid,
            name=process.name,
            initial_tier=tier,
            burst=process.total_work,
            remaining=process.remaining_time,
            lowest_tier_reached=tier,
        )

    def record(self, record: TraceRecord) -> None:
        if record.event_type == TraceEventType.BOOST:
            self.boost_count += 1
            self.boost_moves += record.moved
            if record.moved == 0:
                self.idle_boosts += 1
            return

        self.tier_dispatches[record.tier] += 1
        self.tier_executed[record.tier] += record.executed

        ps = self.process_stats.get(record.pid)
        if ps is None:
            return
        ps.lowest_tier_reached = max(ps.lowest_tier_reached, record.tier, record.next_tier)
        if record.event_type == TraceEventType.COMPLETE:
            ps.finish_time = record.timestamp
            ps.outcome = OUTCOME_COMPLETE
        elif record.event_type == TraceEventType.DROP:
            ps.finish_time = record.timestamp
            ps.outcome = OUTCOME_DROPPED

    def finalize(self, processes: list[Process], duration: int, rounds: int = 0) -> None:
        """Collect final counters from process objects."""
        self.simulation_duration = duration
        self.rounds = rounds
        for process in processes:
            ps = self.process_stats.get(process.pid)
            if ps:
                ps.executed = process.total_executed_time
                ps.remaining = process.remaining_time
                ps.dispatches = process.dispatch_count
                ps.demotions = process.demotion_count
                ps.boosts = process.boost_count

    @property
    def completed(self) -> list[ProcessStats]:
        return [ps for ps in self.process_stats.values() if ps.is_complete]

    @property
    def dropped(self) -> list[ProcessStats]:
        return [ps for ps in self.process_stats.values() if ps.outcome == OUTCOME_DROPPED]

    @property
    def avg_turnaround(self) -> float:
        # Every process arrives at t=0, so turnaround is the finish time.
        done = self.completed
        if not done:
            return 0.0
        return sum(ps.finish_time or 0 for ps in done) / len(done)

    def print_summary(self) -> None:
        """Print a formatted summary of simulation results."""
        print("\n" + "=" * 72)
        print("MLFQ Scheduler Simulation Results")
        print("=" * 72)
        print(
            f"Clock: {self.simulation_duration} | Rounds: {self.rounds} | "
            f"Completed: {len(self.completed)}/{len(self.process_stats)} | "
            f"Dropped: {len(self.dropped)} | Boosts: {self.boost_count} "
            f"({self.boost_moves} moved)"
        )
        print(f"Avg turnaround: {self.avg_turnaround:.1f}")
        print()

        print("Per-Tier Summary:")
        print(f"  {'Tier':<6} {'Dispatches':>10} {'Executed':>9}")
        print("  " + "-" * 27)
        for tier in range(self.num_levels):
            print(
                f"  {'Q' + str(tier):<6} {self.tier_dispatches[tier]:>10} "
                f"{self.tier_executed[tier]:>9}"
            )
        print()

        print("Per-Process Detail:")
        print(
            f"  {'Name':<12} {'PID':>5} {'Tier':>4} {'Burst':>6} {'Exec':>6} "
            f"{'Left':>5} {'Disp':>5} {'Demote':>6} {'Boost':>5} {'Finish':>7} Outcome"
        )
        print("  " + "-" * 80)
        for ps in sorted(self.process_stats.values(), key=lambda x: x.pid):
            finish = "-" if ps.finish_time is None else str(ps.finish_time)
            print(
                f"  {ps.name:<12} {ps.pid:>5} {ps.initial_tier:>4} {ps.burst:>6} "
                f"{ps.executed:>6} {ps.remaining:>5} {ps.dispatches:>5} "
                f"{ps.demotions:>6} {ps.boosts:>5} {finish:>7} {ps.outcome}"
            )

        print("=" * 72)
