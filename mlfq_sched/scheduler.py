"""
Core MLFQ scheduler: tiers, dispatch/demotion, and the boost trigger.

Operations the driver calls:
  - add_process: classify a process into a tier
  - execute_process: run one quantum from a tier, then demote or retire
  - update_time: advance the clock and boost on interval boundaries
  - priority_boost: move every lower-tier process back to tier 0

Tier 0 is the highest priority. The clock is explicit scheduler state.
"""

from __future__ import annotations

from typing import Sequence

from .config import SchedulerConfig
from .constants import (
    BOOST_INTERVAL,
    TOP_TIER,
    DispatchOrder,
    LowestTierPolicy,
)
from .process import Process
from .tier import Tier
from .trace import TraceEventType, TraceRecord


class MLFQScheduler:
    """Multi-level feedback queue over a fixed table of tiers."""

    __slots__ = (
        "num_levels",
        "time_quanta",
        "boost_interval",
        "dispatch_order",
        "lowest_tier_policy",
        "current_time",
        "boost_count",
        "trace_enabled",
        "trace_log",
        "records",
        "_tiers",
    )

    def __init__(
        self,
        num_levels: int,
        time_quanta: Sequence[int],
        boost_interval: int = BOOST_INTERVAL,
        dispatch_order: DispatchOrder = DispatchOrder.LIFO,
        lowest_tier_policy: LowestTierPolicy = LowestTierPolicy.DROP,
        trace: bool = False,
    ) -> None:
        quanta = tuple(time_quanta)
        SchedulerConfig(
            num_levels=num_levels,
            time_quanta=quanta,
            boost_interval=boost_interval,
        ).validate()

        self.num_levels = num_levels
        self.time_quanta: tuple[int, ...] = quanta
        self.boost_interval = boost_interval
        self.dispatch_order = DispatchOrder(dispatch_order)
        self.lowest_tier_policy = LowestTierPolicy(lowest_tier_policy)
        self.current_time: int = 0
        self.boost_count: int = 0
        self.trace_enabled = trace
        self.trace_log: list[str] = []
        self.records: list[TraceRecord] = []
        self._tiers: tuple[Tier, ...] = tuple(Tier(i) for i in range(num_levels))

    @classmethod
    def from_config(cls, config: SchedulerConfig, trace: bool = False) -> MLFQScheduler:
        return cls(
            num_levels=config.num_levels,
            time_quanta=config.time_quanta,
            boost_interval=config.boost_interval,
            dispatch_order=config.dispatch_order,
            lowest_tier_policy=config.lowest_tier_policy,
            trace=trace,
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def tiers(self) -> tuple[Tier, ...]:
        return self._tiers

    @property
    def lowest_tier(self) -> int:
        return self.num_levels - 1

    def tier_sizes(self) -> list[int]:
        return [len(tier) for tier in self._tiers]

    def process_count(self) -> int:
        return sum(len(tier) for tier in self._tiers)

    def is_idle(self) -> bool:
        return all(tier.empty() for tier in self._tiers)

    def highest_nonempty_tier(self) -> int:
        """Return the highest-priority tier index holding work, or -1."""
        for tier in self._tiers:
            if not tier.empty():
                return tier.index
        return -1

    def dump(self) -> list[str]:
        """Debug listing of every tier, one line per tier."""
        return [f"Queue {tier.index}: {list(tier)!r}" for tier in self._tiers]

    # ------------------------------------------------------------------
    # Trace
    # ------------------------------------------------------------------

    def _emit(self, record: TraceRecord) -> TraceRecord:
        self.records.append(record)
        if self.trace_enabled:
            self.trace_log.append(str(record))
        return record

    def drain_records(self) -> list[TraceRecord]:
        """Return the records emitted so far and forget them."""
        drained = self.records
        self.records = []
        return drained

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def add_process(self, process: Process) -> int:
        """Queue ``process`` at the tail of its requested tier.

        A priority past the lowest tier is clamped to the lowest tier rather
        than rejected. Returns the tier index the process was queued on.
        """
        if process.priority < 0:
            raise ValueError(f"priority must be >= 0, got {process.priority}")
        if process.is_finished:
            raise ValueError(f"Process {process.pid} has no remaining work")

        index = process.priority
        if index >= self.num_levels:
            index = self.lowest_tier
            process.priority = index
        self._tiers[index].enqueue(process)
        return index

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _check_tier_index(self, tier_index: int) -> None:
        # Tuple indexing would accept negative indices; reject them here.
        if not 0 <= tier_index < self.num_levels:
            raise IndexError(
                f"tier index {tier_index} out of range for {self.num_levels} tiers"
            )

    def execute_process(self, tier_index: int) -> TraceRecord | None:
        """Run the next process of ``tier_index`` for at most one quantum.

        The executed amount advances the clock. An unfinished process moves to
        the next-lower tier; at the lowest tier it is dropped or requeued per
        ``lowest_tier_policy``. Finished processes are not requeued.

        Returns the dispatch record, or None when the tier is empty.
        """
        self._check_tier_index(tier_index)
        tier = self._tiers[tier_index]

        process = tier.dequeue(self.dispatch_order)
        if process is None:
            return None

        executed = process.run_for(self.time_quanta[tier_index])
        self.current_time += executed

        next_tier = -1
        if process.is_finished:
            event_type = TraceEventType.COMPLETE
        elif tier_index + 1 < self.num_levels:
            next_tier = tier_index + 1
            process.priority = next_tier
            process.demotion_count += 1
            self._tiers[next_tier].enqueue(process)
            event_type = TraceEventType.DEMOTE
        elif self.lowest_tier_policy is LowestTierPolicy.REQUEUE:
            next_tier = tier_index
            tier.enqueue(process)
            event_type = TraceEventType.REQUEUE
        else:
            event_type = TraceEventType.DROP

        return self._emit(TraceRecord(
            timestamp=self.current_time,
            event_type=event_type,
            tier=tier_index,
            pid=process.pid,
            executed=executed,
            remaining=process.remaining_time,
            next_tier=next_tier,
        ))

    # ------------------------------------------------------------------
    # Starvation avoidance
    # ------------------------------------------------------------------

    def priority_boost(self) -> int:
        """Move every process in tiers 1..N-1 to the tail of tier 0.

        Tier 0 keeps its current contents. Returns the number moved.
        """
        top = self._tiers[TOP_TIER]
        moved = 0
        for tier in self._tiers[1:]:
            for process in tier.drain():
                process.priority = TOP_TIER
                process.boost_count += 1
                top.enqueue(process)
                moved += 1

        self.boost_count += 1
        self._emit(TraceRecord(
            timestamp=self.current_time,
            event_type=TraceEventType.BOOST,
            tier=TOP_TIER,
            next_tier=TOP_TIER,
            moved=moved,
        ))
        return moved

    def update_time(self, elapsed: int) -> bool:
        """Advance the clock by ``elapsed`` and boost on an interval boundary.

        The boundary check runs on every call, so ``update_time(0)`` while
        sitting on a multiple of the interval boosts again.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be >= 0, got {elapsed}")

        self.current_time += elapsed
        if self.current_time % self.boost_interval == 0:
            self.priority_boost()
            return True
        return False

    def __repr__(self) -> str:
        return (
            f"MLFQScheduler(levels={self.num_levels}, quanta={list(self.time_quanta)}, "
            f"t={self.current_time}, queued={self.tier_sizes()})"
        )
