from __future__ import annotations

import contextlib
import io
import random
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import main
from mlfq_sched.config import (
    SchedulerConfig,
    config_from_env,
    load_scheduler_config,
    parse_quanta,
)
from mlfq_sched.constants import DispatchOrder, LowestTierPolicy
from mlfq_sched.process import Process
from simulator.engine import SimulationEngine
from simulator.stats import OUTCOME_COMPLETE, OUTCOME_DROPPED
from simulator.workload import get_scenario, random_workload


class SimulationEngineTests(unittest.TestCase):
    def test_reference_scenario_drain_run(self) -> None:
        engine = SimulationEngine(trace=True)
        engine.add_workload(get_scenario("reference"))

        dispatches = engine.run()

        self.assertEqual(dispatches, 7)
        self.assertEqual(engine.dispatches, 7)
        self.assertEqual(engine.scheduler.records, [])
        self.assertTrue(engine.scheduler.is_idle())
        # 18 units of work plus one 100-unit tick.
        self.assertEqual(engine.scheduler.current_time, 118)
        self.assertEqual(engine.scheduler.boost_count, 0)
        self.assertIn(
            "Executed Process ID: 2, Time Executed: 2, Time Remaining: 1",
            engine.scheduler.trace_log[0],
        )

        finish = {ps.pid: ps.finish_time for ps in engine.stats.process_stats.values()}
        self.assertEqual(finish, {1: 18, 2: 9, 3: 14})
        self.assertEqual(len(engine.stats.completed), 3)
        self.assertAlmostEqual(engine.stats.avg_turnaround, 41 / 3, places=6)
        self.assertEqual(engine.stats.tier_dispatches, [2, 3, 2])
        self.assertEqual(engine.stats.tier_executed, [4, 9, 5])

    def test_run_is_single_pass_under_requeue(self) -> None:
        config = SchedulerConfig(
            time_quanta=(2, 4, 8),
            lowest_tier_policy=LowestTierPolicy.REQUEUE,
        )
        engine = SimulationEngine(config)
        engine.add_process(Process(pid=1, remaining_time=40))
        engine.add_process(Process(pid=2, remaining_time=3, priority=2))

        engine.run()

        self.assertTrue(engine.scheduler.is_idle())
        self.assertEqual(engine.stats.rounds, 1)
        # 43 units of work plus one 100-unit tick; no boost lands on a multiple.
        self.assertEqual(engine.scheduler.current_time, 143)
        self.assertEqual(engine.stats.boost_count, 0)
        self.assertEqual(len(engine.stats.completed), 2)

    def test_lowest_tier_drop_reported(self) -> None:
        engine = SimulationEngine(SchedulerConfig(num_levels=2, time_quanta=(2, 4)))
        engine.add_process(Process(pid=1, remaining_time=10))

        engine.run()

        ps = engine.stats.process_stats[1]
        self.assertEqual(ps.outcome, OUTCOME_DROPPED)
        self.assertEqual(ps.remaining, 4)
        self.assertEqual(ps.finish_time, 6)
        self.assertEqual(ps.demotions, 1)

    def test_lowest_tier_requeue_runs_to_completion(self) -> None:
        config = SchedulerConfig(
            num_levels=2,
            time_quanta=(2, 4),
            lowest_tier_policy=LowestTierPolicy.REQUEUE,
        )
        engine = SimulationEngine(config)
        engine.add_process(Process(pid=1, remaining_time=10))

        engine.run()

        ps = engine.stats.process_stats[1]
        self.assertEqual(ps.outcome, OUTCOME_COMPLETE)
        self.assertEqual(ps.finish_time, 10)
        self.assertEqual(ps.dispatches, 3)
        self.assertEqual(ps.executed, 10)

    def test_stepwise_run_boosts_long_job(self) -> None:
        config = SchedulerConfig(boost_interval=6)
        engine = SimulationEngine(config)
        process = Process(pid=1, remaining_time=30)
        engine.add_process(process)

        steps = engine.run_stepwise()

        self.assertEqual(steps, 10)
        self.assertEqual(engine.scheduler.current_time, 30)
        # Boosts at t=6, 12, 18, 24 move the job; the one at t=30 moves nothing.
        self.assertEqual(engine.stats.boost_count, 5)
        self.assertEqual(engine.stats.boost_moves, 4)
        self.assertEqual(engine.stats.idle_boosts, 1)
        self.assertEqual(process.boost_count, 4)
        self.assertEqual(process.demotion_count, 9)
        self.assertEqual(engine.stats.process_stats[1].finish_time, 30)

    def test_overflow_scenario_clamps_to_lowest_tier(self) -> None:
        engine = SimulationEngine()
        engine.add_workload(get_scenario("overflow"))
        self.assertEqual(engine.scheduler.tier_sizes(), [1, 0, 3])
        initial = {ps.pid: ps.initial_tier for ps in engine.stats.process_stats.values()}
        self.assertEqual(initial, {1: 2, 2: 2, 3: 2, 4: 0})

    def test_zero_quantum_hits_dispatch_limit(self) -> None:
        config = SchedulerConfig(
            num_levels=1,
            time_quanta=(0,),
            lowest_tier_policy=LowestTierPolicy.REQUEUE,
        )
        engine = SimulationEngine(config, max_dispatches=5)
        engine.add_process(Process(pid=1, remaining_time=3))
        with self.assertRaises(RuntimeError):
            engine.run()
        self.assertEqual(engine.dispatches, 5)

    def test_fifo_order_changes_completion_sequence(self) -> None:
        config = SchedulerConfig(dispatch_order=DispatchOrder.FIFO)
        engine = SimulationEngine(config)
        engine.add_process(Process(pid=1, remaining_time=2))
        engine.add_process(Process(pid=2, remaining_time=2))
        engine.run()
        finish = {ps.pid: ps.finish_time for ps in engine.stats.process_stats.values()}
        self.assertEqual(finish, {1: 2, 2: 4})

    def test_print_summary(self) -> None:
        engine = SimulationEngine()
        engine.add_workload(get_scenario("mixed"))
        engine.run()
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            engine.stats.print_summary()
        text = out.getvalue()
        self.assertIn("MLFQ Scheduler Simulation Results", text)
        self.assertIn("backup", text)


class WorkloadTests(unittest.TestCase):
    def test_unknown_scenario_fails_fast(self) -> None:
        with self.assertRaises(KeyError):
            get_scenario("nope")

    def test_random_workload_is_seeded(self) -> None:
        random.seed(7)
        first = random_workload()
        random.seed(7)
        second = random_workload()
        self.assertEqual(first, second)
        self.assertTrue(all(spec.burst >= 1 for spec in first))


class ConfigTests(unittest.TestCase):
    def test_parse_quanta(self) -> None:
        self.assertEqual(parse_quanta("2, 4,8"), (2, 4, 8))
        with self.assertRaises(ValueError):
            parse_quanta("2,x")
        with self.assertRaises(ValueError):
            parse_quanta(" , ")

    def test_validate_rejects_mismatched_table(self) -> None:
        with self.assertRaises(ValueError):
            SchedulerConfig(num_levels=2, time_quanta=(2, 4, 8)).validate()

    def test_quanta_length_sets_levels(self) -> None:
        config = config_from_env({"QUANTA": "1,2,3,4"})
        self.assertEqual(config.num_levels, 4)
        self.assertEqual(config.time_quanta, (1, 2, 3, 4))

    def test_levels_without_quanta_warns(self) -> None:
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            config = config_from_env({"LEVELS": "5"})
        self.assertEqual(config.num_levels, 3)
        self.assertEqual(config.time_quanta, (2, 4, 8))
        self.assertIn("LEVELS=5", err.getvalue())

    def test_matching_levels_and_quanta_do_not_warn(self) -> None:
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            config = config_from_env({"LEVELS": "2", "QUANTA": "5,10"})
        self.assertEqual(config.num_levels, 2)
        self.assertEqual(err.getvalue(), "")

    def test_bad_values_fall_back_to_defaults(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            config = config_from_env({"DISPATCH_ORDER": "random", "BOOST_INTERVAL": "x"})
        self.assertIs(config.dispatch_order, DispatchOrder.LIFO)
        self.assertEqual(config.boost_interval, 100)

    def test_load_from_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text(
                "# scheduler\n"
                "LEVELS=2\n"
                "export QUANTA='3,6'\n"
                "DISPATCH_ORDER=fifo\n"
                "LOWEST_TIER=requeue\n"
                "TICK=50\n",
                encoding="utf-8",
            )
            config = load_scheduler_config(str(env_file))

        self.assertEqual(config.num_levels, 2)
        self.assertEqual(config.time_quanta, (3, 6))
        self.assertIs(config.dispatch_order, DispatchOrder.FIFO)
        self.assertIs(config.lowest_tier_policy, LowestTierPolicy.REQUEUE)
        self.assertEqual(config.tick, 50)

    def test_missing_env_file_uses_defaults(self) -> None:
        config = load_scheduler_config("/nonexistent/.env")
        self.assertEqual(config, SchedulerConfig())


class MainTests(unittest.TestCase):
    def _run_main(self, *args: str) -> str:
        with tempfile.TemporaryDirectory() as tmp:
            argv = ["main.py", "--env-file", str(Path(tmp) / ".env"), *args]
            out = io.StringIO()
            with mock.patch("sys.argv", argv), contextlib.redirect_stdout(out):
                main.main()
        return out.getvalue()

    def test_reference_run_prints_trace_and_queues(self) -> None:
        text = self._run_main("reference", "--no-stats")
        self.assertIn("Executed Process ID: 2, Time Executed: 2, Time Remaining: 1", text)
        self.assertIn("Queue 0: []", text)
        self.assertIn("Queue 2: []", text)
        self.assertNotIn("Simulation Results", text)

    def test_invalid_table_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run_main("--levels", "3", "--quanta", "2,4")

    def test_run_scenario_stepwise(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()):
            engine = main.run_scenario("starvation", mode="step")
        self.assertTrue(engine.scheduler.is_idle())
        self.assertEqual(len(engine.processes), 5)


if __name__ == "__main__":
    unittest.main()
