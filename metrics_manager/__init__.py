"""Periodic metrics collection and fan-out to pluggable listeners."""

from metrics_manager.services.metrics import (
    Counter,
    Gauge,
    Histogram,
    Meter,
    MetricsManager,
    Timer,
    get_metrics_manager,
    set_metrics_manager,
)
from metrics_manager.services.listeners import ListenerFactory, MetricListener

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "Meter",
    "MetricsManager",
    "Timer",
    "get_metrics_manager",
    "set_metrics_manager",
    "ListenerFactory",
    "MetricListener",
]
