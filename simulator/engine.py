"""
Simulation driver for the MLFQ scheduler.

Feeds processes to the scheduler, repeatedly invokes dispatch, and
advances the clock. Two loops are provided:
  - run(): one pass draining each tier in priority order, then one clock tick
  - run_stepwise(): one quantum from the highest non-empty tier per step
"""

from __future__ import annotations

from mlfq_sched.config import SchedulerConfig
from mlfq_sched.constants import DEFAULT_MAX_DISPATCHES
from mlfq_sched.process import Process
from mlfq_sched.scheduler import MLFQScheduler

from .stats import StatsCollector
from .workload import ProcessSpec, create_processes


class SimulationEngine:
    """Drives an MLFQScheduler and tracks statistics for reporting."""

    __slots__ = (
        "config",
        "scheduler",
        "stats",
        "processes",
        "dispatches",
        "max_dispatches",
        "trace",
    )

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        trace: bool = False,
        max_dispatches: int = DEFAULT_MAX_DISPATCHES,
    ) -> None:
        self.config = config or SchedulerConfig()
        self.config.validate()
        self.scheduler = MLFQScheduler.from_config(self.config, trace=trace)
        self.stats = StatsCollector(self.config.num_levels)
        self.processes: list[Process] = []
        self.dispatches: int = 0
        self.max_dispatches = max_dispatches
        self.trace = trace

    def add_process(self, process: Process) -> int:
        """Classify a process into the scheduler and register it for stats."""
        tier = self.scheduler.add_process(process)
        self.processes.append(process)
        self.stats.register_process(process, tier)
        return tier

    def add_workload(self, specs: list[ProcessSpec]) -> None:
        for process in create_processes(specs):
            self.add_process(process)

    def _collect(self) -> None:
        for record in self.scheduler.drain_records():
            self.stats.record(record)

    def _dispatch(self, tier_index: int) -> None:
        if self.dispatches >= self.max_dispatches:
            raise RuntimeError(
                f"Dispatch limit {self.max_dispatches} reached with "
                f"{self.scheduler.process_count()} process(es) still queued; "
                "check for zero time quanta"
            )
        self.scheduler.execute_process(tier_index)
        self.dispatches += 1
        self._collect()

    def drain_tier(self, tier_index: int) -> None:
        """Dispatch from ``tier_index`` until it reports empty."""
        tier = self.scheduler.tiers[tier_index]
        while not tier.empty():
            self._dispatch(tier_index)

    def run(self) -> int:
        """Drain every tier in priority order, then advance the clock by one tick.

        This is a single pass: draining a tier dispatches until it is empty, and
        demoted processes land in lower tiers drained later in the same pass
        while requeued ones stay in the tier being drained, so every tier is
        empty when the tick is applied. Returns the
        number of dispatches.
        """
        for tier_index in range(self.scheduler.num_levels):
            self.drain_tier(tier_index)
        self.scheduler.update_time(self.config.tick)
        self._collect()

        self.stats.finalize(self.processes, self.scheduler.current_time, rounds=1)
        return self.dispatches

    def run_stepwise(self) -> int:
        """Dispatch one quantum at a time from the highest non-empty tier.

        After each dispatch the boost trigger is evaluated at the new clock
        value. Returns the number of dispatches.
        """
        steps = 0
        while True:
            tier_index = self.scheduler.highest_nonempty_tier()
            if tier_index < 0:
                break
            self._dispatch(tier_index)
            self.scheduler.update_time(0)
            self._collect()
            steps += 1

        self.stats.finalize(self.processes, self.scheduler.current_time, steps)
        return steps
