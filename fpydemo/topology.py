"""Deployment topology: rate group division and the timer loop that drives it."""

from __future__ import annotations

import math
import threading
from datetime import timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .core import TopologyState

DEFAULT_DIVIDERS: Tuple[Tuple[int, int], ...] = ((1, 0), (2, 0), (4, 0))
RATE_GROUP_CONTEXT = 0

Interval = Union[float, int, timedelta]


class RateGroupDriver:
    """Divides a base tick into slower rates, one per (divisor, offset) pair."""

    def __init__(self, divisors: Iterable[Sequence[int]]) -> None:
        pairs = []
        for divisor, offset in divisors:
            divisor, offset = int(divisor), int(offset)
            if divisor < 0 or offset < 0:
                raise ValueError(f"divisor {divisor} and offset {offset} must not be negative")
            if divisor and offset >= divisor:
                raise ValueError(f"offset {offset} must be smaller than divisor {divisor}")
            pairs.append((divisor, offset))
        self.divisors: Tuple[Tuple[int, int], ...] = tuple(pairs)
        active = [divisor for divisor, _ in self.divisors if divisor]
        self._rollover = math.lcm(*active) if active else 1
        self._ticks = 0

    def tick(self) -> Tuple[int, ...]:
        """Advance one base tick and return the indices of the outputs that fire."""
        fired = tuple(
            index
            for index, (divisor, offset) in enumerate(self.divisors)
            if divisor and self._ticks % divisor == offset
        )
        self._ticks = (self._ticks + 1) % self._rollover
        return fired


def _interval_seconds(interval: Interval) -> float:
    seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
    if seconds < 0:
        raise ValueError(f"interval {interval!r} must not be negative")
    # The timer works in whole milliseconds.
    return int(seconds * 1000) / 1000


class Topology:
    """Owns the rate groups and cycles them from a timer until stopped."""

    def __init__(self, state: Optional[TopologyState] = None) -> None:
        self.state = state if state is not None else TopologyState()
        self.driver: Optional[RateGroupDriver] = None
        self.rate_groups: List[List[Callable[[int], Any]]] = [[] for _ in DEFAULT_DIVIDERS]
        self.cycles = 0
        self._stop = threading.Event()
        self._set_up = False

    def setup(self) -> None:
        """Configure the rate group driver and make the topology ready to run."""
        self.driver = RateGroupDriver(DEFAULT_DIVIDERS)
        self.cycles = 0
        self._stop.clear()
        self._set_up = True

    def start_rate_groups(self, interval: Interval) -> None:
        """Cycle the rate groups every interval; block until stop_rate_groups is called."""
        if not self._set_up or self.driver is None:
            raise RuntimeError("topology is not set up")
        period = _interval_seconds(interval)
        while not self._stop.is_set():
            for index in self.driver.tick():
                for handler in list(self.rate_groups[index]):
                    handler(RATE_GROUP_CONTEXT)
            self.cycles += 1
            if self._stop.wait(period):
                break

    def stop_rate_groups(self) -> None:
        """Make a running start_rate_groups return."""
        self._stop.set()

    def teardown(self) -> None:
        """Stop cycling and release the driver."""
        self._stop.set()
        self.driver = None
        self._set_up = False