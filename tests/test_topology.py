import threading
from datetime import timedelta

import pytest

from fpydemo.core import SubtopologyState, TopologyState
from fpydemo.topology import DEFAULT_DIVIDERS, RateGroupDriver, Topology


def _stop_after(topology, calls, limit):
    def handler(context):
        calls.append(context)
        if len(calls) >= limit:
            topology.stop_rate_groups()

    return handler


def test_first_tick_fires_every_group():
    driver = RateGroupDriver(DEFAULT_DIVIDERS)
    assert driver.tick() == (0, 1, 2)


def test_fastest_group_fires_every_tick():
    driver = RateGroupDriver(DEFAULT_DIVIDERS)
    assert all(0 in driver.tick() for _ in range(12))


def test_tick_sequence_is_periodic():
    driver = RateGroupDriver(DEFAULT_DIVIDERS)
    first = [driver.tick() for _ in range(4)]
    second = [driver.tick() for _ in range(4)]
    assert first == second


def test_offset_delays_firing():
    driver = RateGroupDriver([(2, 1)])
    assert driver.tick() == ()
    assert driver.tick() == (0,)


def test_zero_divisor_never_fires():
    driver = RateGroupDriver([(0, 0), (1, 0)])
    assert all(driver.tick() == (1,) for _ in range(5))


@pytest.mark.parametrize("divisors", [[(-1, 0)], [(2, 2)], [(3, -1)]])
def test_invalid_divisors_rejected(divisors):
    with pytest.raises(ValueError):
        RateGroupDriver(divisors)


def test_default_state():
    topology = Topology()
    assert topology.state == TopologyState(SubtopologyState(None, 0))


def test_start_before_setup_raises():
    with pytest.raises(RuntimeError):
        Topology().start_rate_groups(0)


def test_rate_groups_run_until_stopped():
    topology = Topology()
    topology.setup()
    calls = []
    topology.rate_groups[0].append(_stop_after(topology, calls, 3))
    topology.start_rate_groups(0)
    assert len(calls) == topology.cycles
    assert all(context == 0 for context in calls)


def test_slower_groups_run_less_often():
    topology = Topology()
    topology.setup()
    fast, medium, slow = [], [], []
    topology.rate_groups[0].append(_stop_after(topology, fast, 8))
    topology.rate_groups[1].append(medium.append)
    topology.rate_groups[2].append(slow.append)
    topology.start_rate_groups(timedelta(0))
    assert len(fast) > len(medium) > len(slow) > 0


def test_stop_before_start_returns_immediately():
    topology = Topology()
    topology.setup()
    topology.stop_rate_groups()
    topology.start_rate_groups(0)
    assert topology.cycles == 0


def test_negative_interval_rejected():
    topology = Topology()
    topology.setup()
    with pytest.raises(ValueError):
        topology.start_rate_groups(-1)


def test_stop_from_other_thread():
    topology = Topology()
    topology.setup()
    started = threading.Event()
    topology.rate_groups[0].append(lambda context: started.set())
    worker = threading.Thread(target=topology.start_rate_groups, args=(0.01,))
    worker.start()
    assert started.wait(5)
    topology.stop_rate_groups()
    worker.join(5)
    assert not worker.is_alive()


def test_teardown_requires_new_setup():
    topology = Topology()
    topology.setup()
    topology.teardown()
    assert topology.driver is None
    with pytest.raises(RuntimeError):
        topology.start_rate_groups(0)