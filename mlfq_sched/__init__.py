"""Multi-level feedback queue CPU scheduler simulation core."""

from mlfq_sched.config import SchedulerConfig, load_scheduler_config
from mlfq_sched.constants import BOOST_INTERVAL, DispatchOrder, LowestTierPolicy
from mlfq_sched.process import Process
from mlfq_sched.scheduler import MLFQScheduler
from mlfq_sched.tier import Tier
from mlfq_sched.trace import TraceEventType, TraceRecord

__all__ = [
    "BOOST_INTERVAL",
    "DispatchOrder",
    "LowestTierPolicy",
    "MLFQScheduler",
    "Process",
    "SchedulerConfig",
    "Tier",
    "TraceEventType",
    "TraceRecord",
    "load_scheduler_config",
]
