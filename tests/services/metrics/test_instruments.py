"""
Unit tests for the instrument types.

Clocks are injected so rate calculations are deterministic.
"""

import math

import pytest

from metrics_manager.services.metrics.instruments import (
    CachedGauge,
    Counter,
    EWMA,
    Gauge,
    Histogram,
    InstrumentKind,
    Meter,
    Snapshot,
    Timer,
    kind_of,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_counter_inc_and_dec():
    counter = Counter()
    counter.inc()
    counter.inc(4)
    counter.dec(2)
    assert counter.count == 3


def test_gauge_reads_supplier_every_time():
    values = iter([1, 2, 3])
    gauge = Gauge(lambda: next(values))
    assert gauge.value == 1
    assert gauge.value == 2


def test_cached_gauge_reuses_value_until_timeout():
    clock = FakeClock()
    calls = []

    def supplier():
        calls.append(1)
        return len(calls)

    gauge = CachedGauge(supplier, timeout=10.0, clock=clock)
    assert gauge.value == 1
    clock.now += 5.0
    assert gauge.value == 1
    clock.now += 5.0
    assert gauge.value == 2
    assert len(calls) == 2


def test_ewma_first_tick_uses_instant_rate():
    ewma = EWMA(1)
    ewma.update(10)
    ewma.tick()
    assert ewma.rate == pytest.approx(2.0)  # 10 events / 5 s

    # Without new events the rate decays but stays positive
    ewma.tick()
    assert 0.0 < ewma.rate < 2.0


def test_meter_mean_rate_and_count():
    clock = FakeClock()
    meter = Meter(clock=clock)
    assert meter.mean_rate == 0.0

    meter.mark(10)
    clock.now += 5.0
    assert meter.count == 10
    assert meter.mean_rate == pytest.approx(2.0)


def test_meter_windowed_rates_after_ticks():
    clock = FakeClock()
    meter = Meter(clock=clock)
    meter.mark(60)
    clock.now += 6.0

    # One tick elapsed: every EWMA starts at the instant rate
    assert meter.one_minute_rate == pytest.approx(12.0)
    assert meter.five_minute_rate == pytest.approx(12.0)
    assert meter.fifteen_minute_rate == pytest.approx(12.0)

    clock.now += 60.0
    # The 1-minute average decays faster than the 15-minute one
    assert meter.one_minute_rate < meter.fifteen_minute_rate


def test_snapshot_statistics():
    snapshot = Snapshot([5, 1, 4, 2, 3])
    assert snapshot.size == 5
    assert snapshot.min == 1.0
    assert snapshot.max == 5.0
    assert snapshot.mean == pytest.approx(3.0)
    assert snapshot.median == pytest.approx(3.0)
    assert snapshot.std_dev == pytest.approx(math.sqrt(2.5))
    assert snapshot.values == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert snapshot.percentile(1.0) == 5.0


def test_empty_snapshot_reports_zeros():
    snapshot = Snapshot([])
    assert snapshot.size == 0
    assert (snapshot.min, snapshot.max, snapshot.mean, snapshot.median, snapshot.std_dev) == (0.0, 0.0, 0.0, 0.0, 0.0)
    assert snapshot.percentile(0.5) == 0.0


def test_snapshot_percentile_rejects_out_of_range():
    with pytest.raises(ValueError):
        Snapshot([1, 2]).percentile(1.5)


def test_histogram_count_exceeds_window():
    histogram = Histogram(window_size=10)
    for i in range(25):
        histogram.update(i)

    assert histogram.count == 25
    snapshot = histogram.snapshot()
    assert snapshot.size == 10
    assert snapshot.min == 15.0
    assert snapshot.max == 24.0


def test_histogram_snapshot_is_detached_from_later_updates():
    histogram = Histogram()
    histogram.update(1)
    snapshot = histogram.snapshot()
    histogram.update(100)
    assert snapshot.max == 1.0


def test_timer_records_durations_and_ignores_negative():
    timer = Timer()
    timer.update(12.5)
    timer.update(-1)
    with timer.time():
        pass

    assert timer.count == 2
    snapshot = timer.snapshot()
    assert snapshot.max == 12.5
    assert snapshot.min >= 0.0


@pytest.mark.parametrize("instrument,kind", [
    (Counter(), InstrumentKind.COUNTER),
    (Gauge(lambda: 1), InstrumentKind.GAUGE),
    (CachedGauge(lambda: 1, 1.0), InstrumentKind.GAUGE),
    (Meter(), InstrumentKind.METER),
    (Histogram(), InstrumentKind.HISTOGRAM),
    (Timer(), InstrumentKind.TIMER),
])
def test_kind_of(instrument, kind):
    assert kind_of(instrument) == kind


def test_kind_of_unknown_object():
    assert kind_of(object()) is None
