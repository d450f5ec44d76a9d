"""Instrument types sampled by the MetricsManager.

Five kinds of instruments are supported: Counter, Gauge, Meter, Histogram and
Timer. All of them are safe to update from any thread while the scheduler
thread reads them.
"""

import math
import threading
import time
from collections import deque
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Optional

import numpy as np

# Seconds between two EWMA ticks
TICK_INTERVAL = 5.0

# Default number of samples kept by a Histogram
DEFAULT_WINDOW_SIZE = 1028


class InstrumentKind(str, Enum):
    GAUGE = "gauge"
    COUNTER = "counter"
    METER = "meter"
    HISTOGRAM = "histogram"
    TIMER = "timer"


class Counter:
    """Integer count that can be incremented and decremented."""

    def __init__(self, initial: int = 0):
        self._count = initial
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        return self._count


class Gauge:
    """Point-in-time value computed on every read.

    Args:
        supplier: Zero-argument callable returning the current value
    """

    def __init__(self, supplier: Callable[[], Any]):
        self._supplier = supplier

    @property
    def value(self) -> Any:
        return self._supplier()


class CachedGauge(Gauge):
    """Gauge that reuses its last value for ``timeout`` seconds.

    Used for suppliers that are expensive to call (e.g. walking every
    thread in the process).
    """

    def __init__(self, supplier: Callable[[], Any], timeout: float,
                 clock: Callable[[], float] = time.monotonic):
        super().__init__(supplier)
        self._timeout = timeout
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: Any = None
        self._reload_at: Optional[float] = None

    @property
    def value(self) -> Any:
        with self._lock:
            now = self._clock()
            if self._reload_at is None or now >= self._reload_at:
                self._cached = self._supplier()
                self._reload_at = now + self._timeout
            return self._cached


class EWMA:
    """Exponentially weighted moving average of an event rate.

    Rates are expressed in events per second and updated on each tick.
    """

    def __init__(self, minutes: int, interval: float = TICK_INTERVAL):
        self.alpha = 1.0 - math.exp(-interval / 60.0 / minutes)
        self.interval = interval
        self._uncounted = 0
        self._rate = 0.0
        self._initialized = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant_rate = self._uncounted / self.interval
        self._uncounted = 0
        if self._initialized:
            self._rate += self.alpha * (instant_rate - self._rate)
        else:
            self._rate = instant_rate
            self._initialized = True

    @property
    def rate(self) -> float:
        return self._rate


class Meter:
    """Counts occurrences and derives mean and 1/5/15-minute rates.

    Args:
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._start_time = clock()
        self._last_tick = self._start_time
        self._m1 = EWMA(1)
        self._m5 = EWMA(5)
        self._m15 = EWMA(15)

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._tick_if_necessary()
            self._count += n
            self._m1.update(n)
            self._m5.update(n)
            self._m15.update(n)

    def _tick_if_necessary(self) -> None:
        now = self._clock()
        age = now - self._last_tick
        if age > TICK_INTERVAL:
            ticks = int(age // TICK_INTERVAL)
            self._last_tick += ticks * TICK_INTERVAL
            for _ in range(ticks):
                self._m1.tick()
                self._m5.tick()
                self._m15.tick()

    def _rate(self, ewma: EWMA) -> float:
        with self._lock:
            self._tick_if_necessary()
            return ewma.rate

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean_rate(self) -> float:
        if self._count == 0:
            return 0.0
        elapsed = self._clock() - self._start_time
        if elapsed <= 0:
            return 0.0
        return self._count / elapsed

    @property
    def one_minute_rate(self) -> float:
        return self._rate(self._m1)

    @property
    def five_minute_rate(self) -> float:
        return self._rate(self._m5)

    @property
    def fifteen_minute_rate(self) -> float:
        return self._rate(self._m15)


class Snapshot:
    """Immutable statistical view over a set of recorded values.

    All statistics are computed once, on construction, so every value read
    from the same snapshot is mutually consistent.
    """

    def __init__(self, values: Iterable[float]):
        self._values = np.sort(np.asarray(list(values), dtype=float))
        size = self._values.size
        if size == 0:
            self.min = 0.0
            self.max = 0.0
            self.mean = 0.0
            self.median = 0.0
            self.std_dev = 0.0
        else:
            self.min = float(self._values[0])
            self.max = float(self._values[-1])
            self.mean = float(np.mean(self._values))
            self.median = float(np.median(self._values))
            self.std_dev = float(np.std(self._values, ddof=1)) if size > 1 else 0.0

    @property
    def size(self) -> int:
        return int(self._values.size)

    @property
    def values(self) -> list:
        return self._values.tolist()

    def percentile(self, quantile: float) -> float:
        """Value at the given quantile, between 0.0 and 1.0."""
        if not 0.0 <= quantile <= 1.0 or math.isnan(quantile):
            raise ValueError(f"{quantile} is not in [0..1]")
        if self._values.size == 0:
            return 0.0
        return float(np.quantile(self._values, quantile))


class Histogram:
    """Distribution of recorded values over a sliding window.

    ``count`` is the total number of updates ever recorded while the
    snapshot only covers the most recent ``window_size`` values.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE):
        self._window: deque = deque(maxlen=window_size)
        self._count = 0
        self._lock = threading.Lock()

    def update(self, value: float) -> None:
        with self._lock:
            self._window.append(value)
            self._count += 1

    @property
    def count(self) -> int:
        return self._count

    def snapshot(self) -> Snapshot:
        with self._lock:
            values = list(self._window)
        return Snapshot(values)


class Timer:
    """Histogram of durations in milliseconds plus a meter of timed events.

    Usage example:
    ```python
    with timer.time():
        handle_request()
    ```
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE,
                 clock: Callable[[], float] = time.monotonic):
        self._histogram = Histogram(window_size)
        self._meter = Meter(clock)

    def update(self, duration_ms: float) -> None:
        # Negative durations are dropped
        if duration_ms < 0:
            return
        self._histogram.update(duration_ms)
        self._meter.mark()

    @contextmanager
    def time(self) -> Iterator[None]:
        t0 = time.monotonic_ns()
        try:
            yield
        finally:
            self.update((time.monotonic_ns() - t0) / 1_000_000.0)

    @property
    def count(self) -> int:
        return self._histogram.count

    @property
    def mean_rate(self) -> float:
        return self._meter.mean_rate

    @property
    def one_minute_rate(self) -> float:
        return self._meter.one_minute_rate

    @property
    def five_minute_rate(self) -> float:
        return self._meter.five_minute_rate

    @property
    def fifteen_minute_rate(self) -> float:
        return self._meter.fifteen_minute_rate

    def snapshot(self) -> Snapshot:
        return self._histogram.snapshot()


def kind_of(instrument: Any) -> Optional[InstrumentKind]:
    """Return the InstrumentKind of an object, or None if it is not an instrument."""
    if isinstance(instrument, Gauge):
        return InstrumentKind.GAUGE
    if isinstance(instrument, Counter):
        return InstrumentKind.COUNTER
    if isinstance(instrument, Meter):
        return InstrumentKind.METER
    if isinstance(instrument, Timer):
        return InstrumentKind.TIMER
    if isinstance(instrument, Histogram):
        return InstrumentKind.HISTOGRAM
    return None
