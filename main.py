#!/usr/bin/env python3
"""
MLFQ Scheduler - Simulation Driver

Runs a fixed set of processes through a multi-level feedback queue
scheduler and reports what happened.

Usage:
  python main.py [scenario] [options]

Scenarios:
  reference   - Two top-tier jobs and one second-tier job (default)
  starvation  - Short interactive jobs alongside long batch jobs
  mixed       - Jobs of varied length across every tier
  overflow    - Requested priorities past the lowest tier
  random      - Random bursts and priorities (see --seed)

Options:
  --env-file PATH      Path to env defaults file (default: .env)
  --levels N           Number of priority tiers (default: 3)
  --quanta LIST        Comma-separated quantum per tier (default: 2,4,8)
  --tick T             Clock advance after each drain round (default: 100)
  --boost-interval B   Boost when the clock is a multiple of B (default: 100)
  --order lifo|fifo    Dispatch order within a tier (default: lifo)
  --lowest-tier drop|requeue
                       Unfinished process at the lowest tier (default: drop)
  --mode drain|step    Driver loop (default: drain)
  --trace / --no-trace Print per-dispatch trace
  --dump / --no-dump   Print final tier contents
  --stats / --no-stats Print summary statistics
  --seed N             Random seed for reproducibility

Env keys in .env:
  SCENARIO, LEVELS, QUANTA, TICK, BOOST_INTERVAL, DISPATCH_ORDER,
  LOWEST_TIER, MODE, TRACE, DUMP, STATS, SEED
"""

from __future__ import annotations

import argparse
import random
import sys

from mlfq_sched.config import (
    DEFAULT_ENV_FILE,
    SchedulerConfig,
    config_from_env,
    env_bool,
    env_opt_int,
    load_env_file,
    parse_quanta,
)
from mlfq_sched.constants import DispatchOrder, LowestTierPolicy
from simulator.engine import SimulationEngine
from simulator.workload import SCENARIOS, get_scenario

MODES = ("drain", "step")


def _defaults_from_env(env: dict[str, str]) -> dict[str, object]:
    scenario = env.get("SCENARIO", "reference")
    if scenario not in SCENARIOS:
        print(f"Warning: SCENARIO={scenario!r} is unknown. Using 'reference'.", file=sys.stderr)
        scenario = "reference"
    mode = env.get("MODE", "drain").strip().lower() or "drain"
    if mode not in MODES:
        print(f"Warning: MODE={mode!r} is unknown. Using 'drain'.", file=sys.stderr)
        mode = "drain"

    return {
        "scenario": scenario,
        "config": config_from_env(env),
        "mode": mode,
        "trace": env_bool(env, "TRACE", default=True),
        "dump": env_bool(env, "DUMP", default=True),
        "stats": env_bool(env, "STATS", default=True),
        "seed": env_opt_int(env, "SEED", default=None),
    }


def run_scenario(
    scenario_name: str,
    config: SchedulerConfig | None = None,
    mode: str = "drain",
    trace: bool = False,
    seed: int | None = None,
) -> SimulationEngine:
    """Set up and run a simulation scenario."""
    if seed is not None:
        random.seed(seed)

    engine = SimulationEngine(config=config, trace=trace)
    engine.add_workload(get_scenario(scenario_name))

    print(
        f"Running '{scenario_name}' scenario: {engine.config.num_levels} tiers, "
        f"quanta {list(engine.config.time_quanta)}, mode={mode}"
    )
    print(f"Processes: {len(engine.processes)}")
    if mode == "step":
        engine.run_stepwise()
    else:
        engine.run()

    return engine


def main() -> None:
    argv = sys.argv[1:]

    # Parse env-file first so we can use it for argument defaults.
    env_parser = argparse.ArgumentParser(add_help=False)
    env_parser.add_argument("--env-file", default=DEFAULT_ENV_FILE)
    env_args, _ = env_parser.parse_known_args(argv)
    defaults = _defaults_from_env(load_env_file(env_args.env_file))
    base: SchedulerConfig = defaults["config"]  # type: ignore[assignment]

    parser = argparse.ArgumentParser(
        description="MLFQ Scheduler Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--env-file",
        default=env_args.env_file,
        help=f"Path to env defaults file (default: {DEFAULT_ENV_FILE})",
    )
    parser.add_argument(
        "scenario",
        nargs="?",
        default=defaults["scenario"],
        choices=list(SCENARIOS.keys()),
        help=f"Simulation scenario (default: {defaults['scenario']})",
    )
    parser.add_argument(
        "--levels",
        type=int,
        default=None,
        help=f"Number of priority tiers (default: {base.num_levels}, or len(--quanta))",
    )
    parser.add_argument(
        "--quanta",
        default=",".join(str(q) for q in base.time_quanta),
        help=f"Comma-separated quantum per tier (default: {','.join(map(str, base.time_quanta))})",
    )
    parser.add_argument(
        "--tick",
        type=int,
        default=base.tick,
        help=f"Clock advance after each drain round (default: {base.tick})",
    )
    parser.add_argument(
        "--boost-interval",
        type=int,
        default=base.boost_interval,
        help=f"Boost when the clock is a multiple of this (default: {base.boost_interval})",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in DispatchOrder],
        default=base.dispatch_order.value,
        help=f"Dispatch order within a tier (default: {base.dispatch_order.value})",
    )
    parser.add_argument(
        "--lowest-tier",
        choices=[p.value for p in LowestTierPolicy],
        default=base.lowest_tier_policy.value,
        help=(
            "Unfinished process after a lowest-tier quantum "
            f"(default: {base.lowest_tier_policy.value})"
        ),
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=defaults["mode"],
        help=f"Driver loop (default: {defaults['mode']})",
    )
    parser.add_argument(
        "--trace",
        action=argparse.BooleanOptionalAction,
        default=defaults["trace"],
        help=f"Print per-dispatch trace (default: {'on' if defaults['trace'] else 'off'})",
    )
    parser.add_argument(
        "--dump",
        action=argparse.BooleanOptionalAction,
        default=defaults["dump"],
        help=f"Print final tier contents (default: {'on' if defaults['dump'] else 'off'})",
    )
    parser.add_argument(
        "--stats",
        action=argparse.BooleanOptionalAction,
        default=defaults["stats"],
        help=f"Print summary statistics (default: {'on' if defaults['stats'] else 'off'})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults["seed"],
        help=f"Random seed for reproducibility (default: {defaults['seed']})",
    )

    args = parser.parse_args(argv)

    try:
        quanta = parse_quanta(args.quanta)
        config = SchedulerConfig(
            num_levels=args.levels if args.levels is not None else len(quanta),
            time_quanta=quanta,
            boost_interval=args.boost_interval,
            dispatch_order=DispatchOrder(args.order),
            lowest_tier_policy=LowestTierPolicy(args.lowest_tier),
            tick=args.tick,
        )
        config.validate()
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    engine = run_scenario(
        scenario_name=args.scenario,
        config=config,
        mode=args.mode,
        trace=args.trace,
        seed=args.seed,
    )

    if args.trace:
        print("\n--- Execution Trace ---")
        for line in engine.scheduler.trace_log:
            print(line)

    if args.dump:
        print("\n--- Final Queues ---")
        for line in engine.scheduler.dump():
            print(line)

    if args.stats:
        engine.stats.print_summary()


if __name__ == "__main__":
    main()
