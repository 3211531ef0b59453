"""
Workload definitions for simulation scenarios.

Each scenario is a list of ProcessSpec entries describing the processes
handed to the scheduler before the run starts. All processes arrive at
time 0.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from mlfq_sched.process import Process


@dataclass
class ProcessSpec:
    """Describes one process to create."""

    pid: int
    burst: int  # total work units
    priority: int = 0  # requested tier; past the lowest tier is clamped
    name: str = ""


def create_processes(specs: list[ProcessSpec]) -> list[Process]:
    """Create fresh Process objects from specs."""
    return [
        Process(
            pid=spec.pid,
            priority=spec.priority,
            remaining_time=spec.burst,
            name=spec.name,
        )
        for spec in specs
    ]


# ---------------------------------------------------------------------------
# Built-in scenario workloads
# ---------------------------------------------------------------------------

def reference_workload() -> list[ProcessSpec]:
    """Two top-tier jobs and one second-tier job."""
    return [
        ProcessSpec(pid=1, burst=10, priority=0),
        ProcessSpec(pid=2, burst=3, priority=0),
        ProcessSpec(pid=3, burst=5, priority=1),
    ]


def starvation_workload() -> list[ProcessSpec]:
    """Short interactive jobs alongside long batch jobs."""
    interactive = [
        ProcessSpec(pid=i, burst=2, priority=0, name=f"shell-{i}")
        for i in range(1, 4)
    ]
    batch = [
        ProcessSpec(pid=10 + i, burst=40 + 10 * i, priority=0, name=f"batch-{i}")
        for i in range(2)
    ]
    return interactive + batch


def mixed_workload() -> list[ProcessSpec]:
    """Jobs of varied length spread across every default tier."""
    return [
        ProcessSpec(pid=1, burst=1, priority=0, name="editor"),
        ProcessSpec(pid=2, burst=6, priority=0, name="browser"),
        ProcessSpec(pid=3, burst=12, priority=1, name="indexer"),
        ProcessSpec(pid=4, burst=4, priority=1, name="mailer"),
        ProcessSpec(pid=5, burst=20, priority=2, name="backup"),
        ProcessSpec(pid=6, burst=8, priority=2, name="compiler"),
    ]


def overflow_workload() -> list[ProcessSpec]:
    """Requested priorities past the lowest tier."""
    return [
        ProcessSpec(pid=1, burst=5, priority=3),
        ProcessSpec(pid=2, burst=9, priority=7),
        ProcessSpec(pid=3, burst=2, priority=99),
        ProcessSpec(pid=4, burst=7, priority=0),
    ]


def random_workload(count: int = 8, max_burst: int = 30) -> list[ProcessSpec]:
    """Random bursts and priorities; seed ``random`` for reproducibility."""
    return [
        ProcessSpec(
            pid=i,
            burst=random.randint(1, max_burst),
            priority=random.randint(0, 3),
        )
        for i in range(1, count + 1)
    ]


SCENARIOS: dict[str, Callable[[], list[ProcessSpec]]] = {
    "reference": reference_workload,
    "starvation": starvation_workload,
    "mixed": mixed_workload,
    "overflow": overflow_workload,
    "random": random_workload,
}


def get_scenario(name: str) -> list[ProcessSpec]:
    try:
        factory = SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario: {name!r}") from None
    return factory()
