#!/usr/bin/env python3
"""
Engine tests: event ordering, dispatch, priority, and full-run regressions.
"""

import sys
import unittest
from collections import defaultdict
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from sim.config import Configuration, SampleSet
from sim.dispatch import RULE_FIFO, RULE_VIP_PRIORITY, DispatchPolicy, select_next_client
from sim.entities import Client, PriorityClass, SystemState
from sim.errors import ConfigurationError, InvariantViolation
from sim.events import Event, EventScheduler, EventType
from sim.runner import simulate


def _vip_scenario():
    """Two servers, a client every minute, 10-minute rides, every fifth client VIP."""
    config = Configuration(
        client_count=20,
        server_count=2,
        use_sampled_arrivals=False,
        fixed_initial_arrival=1.0,
        fixed_arrival_interval=1.0,
        use_sampled_service=False,
        fixed_service_duration=10.0,
        use_vip=True,
        vip_fraction=0.2,
    )
    vip = [0.1 if (i + 1) % 5 == 0 else 0.9 for i in range(20)]
    return config, SampleSet.of(vip=vip)


class TestEventScheduler(unittest.TestCase):
    """Test (time, sequence) ordering."""

    def test_pops_in_time_order(self):
        s = EventScheduler()
        for t in (5.0, 1.0, 3.0):
            s.push(Event.arrival(t, client_id=int(t)))
        self.assertEqual([s.pop().time for _ in range(3)], [1.0, 3.0, 5.0])
        self.assertEqual(s.processed, 3)
        self.assertFalse(s)

    def test_ties_follow_insertion_order(self):
        s = EventScheduler()
        s.push(Event.departure(4.0, server_id=1))
        s.push(Event.arrival(4.0, client_id=9))
        self.assertEqual(s.pop().event_type, EventType.DEPARTURE)
        self.assertEqual(s.pop().event_type, EventType.ARRIVAL)

        s.push(Event.arrival(4.0, client_id=9))
        s.push(Event.departure(4.0, server_id=1))
        self.assertEqual(s.pop().event_type, EventType.ARRIVAL)

    def test_peek_and_len(self):
        s = EventScheduler()
        self.assertIsNone(s.peek_time())
        s.push(Event.arrival(2.5, client_id=1))
        self.assertEqual(s.peek_time(), 2.5)
        self.assertEqual(len(s), 1)


class TestDispatchPolicy(unittest.TestCase):
    """Test queue selection and server sweeps in isolation."""

    def _client(self, cid, arrival=0.0, service=1.0, vip=False):
        return Client(
            id=cid,
            arrival_time=arrival,
            service_duration=service,
            priority_class=PriorityClass.VIP if vip else PriorityClass.REGULAR,
        )

    def test_rule_drives_admission(self):
        fifo = DispatchPolicy(use_vip=False)
        priority = DispatchPolicy(use_vip=True)
        self.assertEqual(fifo.rule, RULE_FIFO)
        self.assertEqual(priority.rule, RULE_VIP_PRIORITY)

        state = SystemState.with_servers(1)
        priority.admit(state, self._client(1, vip=True))
        priority.admit(state, self._client(2))
        self.assertEqual([c.id for c in state.vip_queue], [1])
        self.assertEqual([c.id for c in state.regular_queue], [2])

    def test_vip_head_before_regular_head(self):
        state = SystemState.with_servers(1)
        policy = DispatchPolicy(use_vip=True)
        policy.admit(state, self._client(1))
        policy.admit(state, self._client(2, vip=True))
        self.assertEqual(select_next_client(state).id, 2)
        self.assertEqual(select_next_client(state).id, 1)
        self.assertIsNone(select_next_client(state))

    def test_vip_ignored_without_priority(self):
        state = SystemState.with_servers(1)
        policy = DispatchPolicy(use_vip=False)
        policy.admit(state, self._client(1))
        policy.admit(state, self._client(2, vip=True))
        self.assertEqual(len(state.vip_queue), 0)
        self.assertEqual(select_next_client(state).id, 1)
        self.assertEqual(select_next_client(state).id, 2)

    def test_sweep_fills_lowest_server_ids_first(self):
        state = SystemState.with_servers(3)
        scheduler = EventScheduler()
        state.servers[0].busy_until = 5.0
        state.add_to_queue(self._client(1, service=2.0))
        state.add_to_queue(self._client(2, service=3.0))
        started = DispatchPolicy().sweep(state, scheduler)
        self.assertEqual([(r.id, r.server_id) for r in started], [(1, 2), (2, 3)])
        self.assertEqual(len(scheduler), 2)
        self.assertEqual(state.servers[1].busy_until, 2.0)
        self.assertEqual(state.servers[2].busy_until, 3.0)

    def test_server_free_at_exactly_now_is_idle(self):
        state = SystemState.with_servers(1)
        state.current_time = 4.0
        state.servers[0].busy_until = 4.0
        state.add_to_queue(self._client(1, arrival=3.0))
        started = DispatchPolicy().sweep(state, EventScheduler())
        self.assertEqual(started[0].service_start, 4.0)
        self.assertEqual(started[0].wait_time, 1.0)

    def test_negative_duration_is_fatal(self):
        state = SystemState.with_servers(1)
        state.add_to_queue(self._client(1, service=-1.0))
        with self.assertRaises(InvariantViolation):
            DispatchPolicy().sweep(state, EventScheduler())

    def test_start_before_arrival_is_fatal(self):
        state = SystemState.with_servers(1)
        state.current_time = 1.0
        state.add_to_queue(self._client(1, arrival=2.0))
        with self.assertRaises(InvariantViolation):
            DispatchPolicy().sweep(state, EventScheduler())


class TestFifoRun(unittest.TestCase):
    """Five clients, one server, fixed samples."""

    def setUp(self):
        from presets.definitions import get_preset_by_name

        preset = get_preset_by_name("demo_five_clients")
        self.result = simulate(preset["config"], preset["samples"])

    def test_records(self):
        recs = self.result.records
        self.assertEqual([r.id for r in recs], [1, 2, 3, 4, 5])
        self.assertEqual({r.server_id for r in recs}, {1})
        for r, service in zip(recs, [4.0, 4.8, 2.8, 5.6, 3.6]):
            self.assertAlmostEqual(r.service_duration, service)
        expected_waits = [0.0, 0.0, 1.2242206, 0.0, 4.8624764]
        for r, wait in zip(recs, expected_waits):
            self.assertAlmostEqual(r.wait_time, wait, places=5)
        self.assertAlmostEqual(recs[4].service_end, 38.8836895, places=5)

    def test_metrics(self):
        m = self.result.metrics
        self.assertAlmostEqual(m.overall.mean_wait, 1.2173394, places=5)
        self.assertEqual(m.overall.zero_wait_count, 3)
        self.assertAlmostEqual(m.total_span, 38.8836895, places=5)
        self.assertAlmostEqual(m.utilization_pct, 53.4929, places=2)
        self.assertAlmostEqual(m.overall.mean_satisfaction_pct, 82.42, delta=0.01)
        self.assertIsNone(m.vip)
        self.assertEqual(self.result.warnings, ())

    def test_fifo_starts_follow_arrivals(self):
        starts = [r.service_start for r in self.result.records]
        self.assertEqual(starts, sorted(starts))


class TestVipRun(unittest.TestCase):
    """Two servers under constant load with a VIP every fifth client."""

    def setUp(self):
        config, samples = _vip_scenario()
        self.result = simulate(config, samples)
        self.by_id = {r.id: r for r in self.result.records}

    def test_vip_clients_jump_the_queue(self):
        self.assertEqual((self.by_id[5].server_id, self.by_id[5].service_start), (1, 11.0))
        self.assertEqual((self.by_id[10].server_id, self.by_id[10].service_start), (2, 12.0))
        self.assertEqual((self.by_id[15].server_id, self.by_id[15].service_start), (1, 21.0))
        self.assertEqual((self.by_id[20].server_id, self.by_id[20].service_start), (2, 22.0))
        # First regular client left waiting starts only after all VIPs
        self.assertEqual((self.by_id[3].server_id, self.by_id[3].service_start), (1, 31.0))
        self.assertEqual(self.by_id[3].wait_time, 28.0)

    def test_class_metrics(self):
        m = self.result.metrics
        self.assertEqual(m.vip.count, 4)
        self.assertEqual(m.regular.count, 16)
        self.assertAlmostEqual(m.vip.mean_wait, 4.0)
        self.assertAlmostEqual(m.regular.mean_wait, 44.0)
        self.assertEqual(m.vip.zero_wait_count, 0)
        self.assertEqual(m.regular.zero_wait_count, 2)
        self.assertEqual(m.total_span, 102.0)
        self.assertAlmostEqual(m.utilization_pct, 200.0 / 204.0 * 100.0)

    def test_no_vip_waiting_when_regular_starts(self):
        vips = [r for r in self.result.records if r.is_vip]
        for r in self.result.records:
            if r.is_vip:
                continue
            for v in vips:
                if v.arrival_time < r.service_start:
                    self.assertLessEqual(v.service_start, r.service_start, (r.id, v.id))

    def test_regular_queue_stays_fifo(self):
        regular = [r for r in self.result.records if not r.is_vip]
        starts = [r.service_start for r in regular]
        self.assertEqual(starts, sorted(starts))


class TestRunInvariants(unittest.TestCase):
    """Properties that hold for every completed run."""

    def _runs(self):
        from presets.definitions import PRESETS

        for preset in PRESETS:
            yield simulate(preset["config"], preset["samples"])
        config, samples = _vip_scenario()
        yield simulate(config, samples)

    def test_conservation_and_ordering(self):
        for result in self._runs():
            n = result.config.client_count
            self.assertEqual(len(result.records), n)
            self.assertEqual([r.id for r in result.records], list(range(1, n + 1)))
            for r in result.records:
                self.assertGreaterEqual(r.service_start, r.arrival_time)
                self.assertAlmostEqual(r.service_end, r.service_start + r.service_duration)
                self.assertTrue(1 <= r.server_id <= result.config.server_count)
            self.assertGreaterEqual(result.metrics.utilization_pct, 0.0)
            self.assertLessEqual(result.metrics.utilization_pct, 100.0 + 1e-9)

    def test_servers_never_overlap(self):
        for result in self._runs():
            per_server = defaultdict(list)
            for r in result.records:
                per_server[r.server_id].append(r)
            for recs in per_server.values():
                recs.sort(key=lambda r: r.service_start)
                for prev, cur in zip(recs, recs[1:]):
                    self.assertGreaterEqual(cur.service_start, prev.service_end - 1e-9)

    def test_deterministic_given_samples(self):
        config, samples = _vip_scenario()
        self.assertEqual(simulate(config, samples), simulate(config, samples))

    def test_seeded_internal_draws_repeat(self):
        from presets.definitions import get_preset_by_name

        preset = get_preset_by_name("multi_server_vip")
        first = simulate(preset["config"], preset["samples"])
        second = simulate(preset["config"], preset["samples"])
        self.assertEqual(first.records, second.records)

    def test_seeded_run_leaves_global_rng_alone(self):
        import numpy as np

        from presets.definitions import get_preset_by_name

        np.random.seed(123)
        expected = np.random.random_sample()

        # all samples supplied
        preset = get_preset_by_name("demo_five_clients")
        config = Configuration.from_dict({**preset["config"].to_dict(), "seed": 5})
        np.random.seed(123)
        simulate(config, preset["samples"])
        self.assertEqual(np.random.random_sample(), expected)

        # samples drawn internally
        np.random.seed(123)
        simulate(get_preset_by_name("multi_server_vip")["config"])
        self.assertEqual(np.random.random_sample(), expected)


class TestBoundaries(unittest.TestCase):
    """Single-client runs and rejected configurations."""

    def test_single_client_at_time_zero(self):
        config = Configuration(
            client_count=1,
            server_count=1,
            use_sampled_arrivals=False,
            fixed_initial_arrival=0.0,
            use_sampled_service=False,
            fixed_service_duration=5.0,
            use_vip=False,
        )
        result = simulate(config)
        self.assertEqual(result.records[0].wait_time, 0.0)
        self.assertEqual(result.metrics.utilization_pct, 100.0)
        self.assertEqual(result.metrics.overall.mean_satisfaction_pct, 100.0)

    def test_zero_length_rides(self):
        config = Configuration(
            client_count=3,
            server_count=1,
            use_sampled_arrivals=False,
            fixed_initial_arrival=0.0,
            fixed_arrival_interval=0.0,
            use_sampled_service=False,
            fixed_service_duration=0.0,
            use_vip=False,
        )
        result = simulate(config)
        self.assertEqual([r.wait_time for r in result.records], [0.0, 0.0, 0.0])
        self.assertEqual(result.metrics.utilization_pct, 0.0)

    def test_more_servers_than_clients(self):
        config = Configuration(
            client_count=2,
            server_count=5,
            use_sampled_arrivals=False,
            fixed_initial_arrival=1.0,
            fixed_arrival_interval=0.0,
            use_sampled_service=False,
            fixed_service_duration=3.0,
            use_vip=False,
        )
        result = simulate(config)
        self.assertEqual([r.server_id for r in result.records], [1, 2])
        self.assertEqual(result.metrics.overall.zero_wait_count, 2)

    def test_every_problem_reported_at_once(self):
        config = Configuration(client_count=3, server_count=0, arrival_mean=0.0, use_vip=False)
        with self.assertRaises(ConfigurationError) as ctx:
            simulate(config, SampleSet.of(arrivals=[0.5, 2.0, 0.5]))
        errors = ctx.exception.errors
        self.assertEqual(len(errors), 3, errors)
        self.assertTrue(any(e.startswith("server_count") for e in errors))
        self.assertTrue(any(e.startswith("arrival_mean") for e in errors))
        self.assertIn("arrival sample 2 (client 2): value 2.0 is outside (0, 1)", errors)


if __name__ == "__main__":
    unittest.main(verbosity=2)
