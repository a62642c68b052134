"""Cycle counting and K-best estimation of the running time of a function."""

from __future__ import annotations

import bisect
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, TextIO

NEVENT = 100
THRESHOLD = 1000
RECORDTHRESH = 3000

DEFAULT_K = 3
DEFAULT_MAXSAMPLES = 20
DEFAULT_EPSILON = 0.01
DEFAULT_CACHE_BYTES = 1 << 19
DEFAULT_CACHE_BLOCK = 32


def _clock_ticks_per_second() -> int:
    try:
        return int(os.sysconf("SC_CLK_TCK"))
    except (AttributeError, ValueError, OSError):
        return 100


_CLK_TCK = _clock_ticks_per_second()


def _user_ticks() -> int:
    """User CPU time of this process, in clock ticks."""
    return int(os.times().user * _CLK_TCK)


@dataclass
class CycleCounter:
    """A restartable counter of elapsed cycles.

    ``clock`` returns the current cycle count, ``ticks`` the user CPU time in
    clock ticks, and ``sleep`` pauses for a number of seconds.
    """

    clock: Callable[[], float] = field(default=time.perf_counter_ns)
    ticks: Callable[[], int] = field(default=_user_ticks)
    sleep: Callable[[float], None] = field(default=time.sleep)
    cyc_per_tick: float = 0.0
    out: TextIO | None = None
    _start: float = field(default=0, init=False, repr=False)
    _start_tick: int = field(default=0, init=False, repr=False)

    def _print(self, text: str) -> None:
        print(text, file=self.out if self.out is not None else sys.stdout)

    def start(self) -> None:
        """Record the current value of the counter."""
        self._start = self.clock()

    def get(self) -> float:
        """Cycles elapsed since the last call to :meth:`start`."""
        result = float(self.clock() - self._start)
        if result < 0:
            print(f"Error: counter returns neg value: {result:.0f}", file=sys.stderr)
        return result

    def overhead(self) -> float:
        """Cycles taken by a start/get pair, measured twice to warm caches."""
        result = 0.0
        for _ in range(2):
            self.start()
            result = self.get()
        return result

    def mhz(self, verbose: bool = False, sleeptime: float = 2) -> float:
        """Estimate the clock rate in MHz by counting cycles over a sleep."""
        if sleeptime <= 0:
            raise ValueError("sleeptime must be positive")
        self.start()
        self.sleep(sleeptime)
        rate = self.get() / (1e6 * sleeptime)
        if verbose:
            self._print(f"Processor clock rate ~= {rate:.1f} MHz")
        return rate

    def _calibrate(self, verbose: bool) -> None:
        """Estimate how many cycles a timer interrupt costs per clock tick."""
        oldc = self.ticks()
        self.start()
        oldt = self.get()
        events = 0
        while events < NEVENT:
            newt = self.get()
            if newt - oldt >= THRESHOLD:
                newc = self.ticks()
                if newc > oldc:
                    cpt = (newt - oldt) / (newc - oldc)
                    if (self.cyc_per_tick == 0.0 or self.cyc_per_tick > cpt) and cpt > RECORDTHRESH:
                        self.cyc_per_tick = cpt
                    events += 1
                    oldc = newc
                oldt = newt
        if verbose:
            self._print(f"Setting cyc_per_tick to {self.cyc_per_tick:f}")

    def start_compensated(self) -> None:
        """Start a counter that subtracts timer interrupt overhead."""
        if self.cyc_per_tick == 0.0:
            self._calibrate(False)
        self._start_tick = self.ticks()
        self.start()

    def get_compensated(self) -> float:
        """Cycles since :meth:`start_compensated`, less interrupt overhead."""
        elapsed = self.get()
        ticks = self.ticks() - self._start_tick
        return elapsed - ticks * self.cyc_per_tick


class KBestSampler:
    """Keeps the ``k`` smallest samples and tells when they agree."""

    def __init__(self, k: int = DEFAULT_K, epsilon: float = DEFAULT_EPSILON) -> None:
        if k < 1:
            raise ValueError("k must be at least 1")
        self.k = k
        self.epsilon = epsilon
        self.count = 0
        self._values: list[float] = []

    @property
    def values(self) -> tuple[float, ...]:
        """The smallest samples seen so far, in ascending order."""
        return tuple(self._values)

    def add(self, value: float) -> None:
        """Record one sample."""
        self.count += 1
        if len(self._values) < self.k:
            bisect.insort(self._values, value)
        elif value < self._values[-1]:
            self._values.pop()
            bisect.insort(self._values, value)

    def converged(self) -> bool:
        """Whether the ``k`` smallest samples lie within ``epsilon`` of each other."""
        return (
            self.count >= self.k
            and (1 + self.epsilon) * self._values[0] >= self._values[self.k - 1]
        )

    def best(self) -> float:
        """The smallest sample seen."""
        if not self._values:
            raise ValueError("no samples recorded")
        return self._values[0]


class CycleTimer:
    """Estimates the cycles a function takes with the K-best scheme."""

    def __init__(
        self,
        k: int = DEFAULT_K,
        maxsamples: int = DEFAULT_MAXSAMPLES,
        epsilon: float = DEFAULT_EPSILON,
        compensate: bool = False,
        clear_cache: bool = False,
        cache_bytes: int = DEFAULT_CACHE_BYTES,
        cache_block: int = DEFAULT_CACHE_BLOCK,
        counter: CycleCounter | None = None,
    ) -> None:
        if k < 1:
            raise ValueError("k must be at least 1")
        if cache_bytes < 0:
            raise ValueError("cache_bytes must not be negative")
        if cache_block < 1:
            raise ValueError("cache_block must be positive")
        self.k = k
        self.maxsamples = maxsamples
        self.epsilon = epsilon
        self.compensate = compensate
        self.clear_cache = clear_cache
        self.cache_bytes = cache_bytes
        self.cache_block = cache_block
        self.counter = counter if counter is not None else CycleCounter()
        self._cache_buf: bytearray | None = None
        self._sink = 0

    def _clear(self) -> None:
        """Touch one byte per cache block of a large buffer."""
        if self._cache_buf is None or len(self._cache_buf) != self.cache_bytes:
            self._cache_buf = bytearray(self.cache_bytes)
        self._sink = (self._sink + sum(self._cache_buf[:: self.cache_block])) & 0xFFFFFFFF

    def measure(self, func: Callable[[], object]) -> float:
        """Run ``func`` until its K best times agree; return the best, in cycles.

        Gives up after ``maxsamples`` runs and returns the best seen.
        """
        sampler = KBestSampler(self.k, self.epsilon)
        if self.compensate:
            start, stop = self.counter.start_compensated, self.counter.get_compensated
        else:
            start, stop = self.counter.start, self.counter.get
        while True:
            if self.clear_cache:
                self._clear()
            start()
            func()
            sampler.add(stop())
            if sampler.converged() or sampler.count >= self.maxsamples:
                break
        return sampler.best()