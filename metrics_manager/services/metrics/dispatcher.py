"""Snapshot dispatcher - turns registry contents into listener updates.

One pass walks the registry kind by kind (gauges, meters, histograms,
counters, timers) and pushes every derived field to every listener, in the
order the listeners were loaded. Field names are the instrument name,
optionally suffixed:

    gauge              <name>
    counter            <name>
    meter              <name>-mean-rate
                       verbose: -count, -1-minute-rate, -5-minute-rate,
                       -15-minute-rate
    histogram, timer   <name>-count
                       verbose: -max-value, -min-value, -mean-value,
                       -median-value, -standard-deviation-value
"""

from typing import Any, Callable, Dict, Sequence

from metrics_manager.core.logging_config import get_logger
from metrics_manager.services.listeners.base import MetricListener
from .instruments import InstrumentKind, Snapshot
from .registry import InstrumentRegistry

logger = get_logger(__name__)


def _emit(listeners: Sequence[MetricListener], metric_name: str, value: Any) -> None:
    for listener in listeners:
        try:
            listener.update_metric(metric_name, value)
        except Exception as e:
            logger.error(f"Listener {listener.name()} failed to update {metric_name}: {e}")


def _emit_snapshot(listeners: Sequence[MetricListener], metric_name: str, snapshot: Snapshot) -> None:
    _emit(listeners, f"{metric_name}-max-value", snapshot.max)
    _emit(listeners, f"{metric_name}-min-value", snapshot.min)
    _emit(listeners, f"{metric_name}-mean-value", snapshot.mean)
    _emit(listeners, f"{metric_name}-median-value", snapshot.median)
    _emit(listeners, f"{metric_name}-standard-deviation-value", snapshot.std_dev)


def send_gauge_metric(gauge, metric_name: str, listeners: Sequence[MetricListener], verbose: bool) -> None:
    try:
        value = gauge.value
    except Exception as e:
        logger.warning(f"Gauge {metric_name} could not be read: {e}")
        return
    _emit(listeners, metric_name, value)


def send_counter_metric(counter, metric_name: str, listeners: Sequence[MetricListener], verbose: bool) -> None:
    _emit(listeners, metric_name, counter.count)


def send_meter_metric(meter, metric_name: str, listeners: Sequence[MetricListener], verbose: bool) -> None:
    _emit(listeners, f"{metric_name}-mean-rate", meter.mean_rate)

    if verbose:
        _emit(listeners, f"{metric_name}-count", meter.count)
        _emit(listeners, f"{metric_name}-1-minute-rate", meter.one_minute_rate)
        _emit(listeners, f"{metric_name}-5-minute-rate", meter.five_minute_rate)
        _emit(listeners, f"{metric_name}-15-minute-rate", meter.fifteen_minute_rate)


def send_histogram_metric(histogram, metric_name: str, listeners: Sequence[MetricListener], verbose: bool) -> None:
    _emit(listeners, f"{metric_name}-count", histogram.count)

    if verbose:
        # One snapshot per pass so the five values agree with each other
        _emit_snapshot(listeners, metric_name, histogram.snapshot())


# Timers expose the same fields as histograms, over durations in ms
send_timer_metric = send_histogram_metric


SENDERS: Dict[InstrumentKind, Callable[..., None]] = {
    InstrumentKind.GAUGE: send_gauge_metric,
    InstrumentKind.METER: send_meter_metric,
    InstrumentKind.HISTOGRAM: send_histogram_metric,
    InstrumentKind.COUNTER: send_counter_metric,
    InstrumentKind.TIMER: send_timer_metric,
}


def send_all_metrics(registry: InstrumentRegistry, listeners: Sequence[MetricListener], verbose: bool) -> int:
    """Run one dispatch pass.

    Names are enumerated per kind and then looked up one by one. An
    instrument removed in between is a missed sample for this pass.

    Returns:
        Number of instruments sampled
    """
    sampled = 0
    for kind, sender in SENDERS.items():
        for metric_name in registry.names(kind):
            instrument = registry.get(metric_name, kind)
            if instrument is None:
                continue
            sender(instrument, metric_name, listeners, verbose)
            sampled += 1
    return sampled
