"""Periodic metrics collection and dispatch.

Instruments are registered in an InstrumentRegistry owned by a
MetricsManager, which samples them on a fixed interval from a background
thread and pushes the derived fields to the configured listeners.
"""

from .instruments import (
    CachedGauge, Counter, Gauge, Histogram, InstrumentKind, Meter, Snapshot, Timer
)
from .registry import InstrumentRegistry
from .models import EngineConfig, LifecycleState
from .manager import MetricsManager
from .scheduler import MetricsScheduler
from .instance import get_metrics_manager, set_metrics_manager

__all__ = [
    "CachedGauge",
    "Counter",
    "Gauge",
    "Histogram",
    "InstrumentKind",
    "Meter",
    "Snapshot",
    "Timer",
    "InstrumentRegistry",
    "EngineConfig",
    "LifecycleState",
    "MetricsManager",
    "MetricsScheduler",
    "get_metrics_manager",
    "set_metrics_manager",
]
