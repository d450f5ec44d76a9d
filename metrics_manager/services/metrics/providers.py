"""Built-in instrument bundles describing the Python runtime.

Each bundle is a nested mapping of gauges that the MetricsManager registers
directly into the registry under the bundle name, e.g. ``gc.gen0.collections``
or ``memory.process.rss``. These instruments bypass the registration ledger.
"""

import gc
import threading
from typing import Any, Callable, Dict

import psutil

from .instruments import CachedGauge, Gauge

# Seconds a thread census stays cached
THREAD_STATES_CACHE_SECONDS = 10.0


def gc_bundle() -> Dict[str, Any]:
    """Per-generation garbage collector statistics."""
    bundle: Dict[str, Any] = {}
    for generation in range(len(gc.get_stats())):
        bundle[f"gen{generation}"] = {
            "collections": Gauge(lambda g=generation: gc.get_stats()[g]["collections"]),
            "collected": Gauge(lambda g=generation: gc.get_stats()[g]["collected"]),
            "uncollectable": Gauge(lambda g=generation: gc.get_stats()[g]["uncollectable"]),
            "pending": Gauge(lambda g=generation: gc.get_count()[g]),
        }
    return bundle


def memory_bundle() -> Dict[str, Any]:
    """Process and system memory usage in bytes."""
    process = psutil.Process()
    return {
        "process": {
            "rss": Gauge(lambda: process.memory_info().rss),
            "vms": Gauge(lambda: process.memory_info().vms),
            "percent": Gauge(lambda: process.memory_percent()),
        },
        "system": {
            "total": Gauge(lambda: psutil.virtual_memory().total),
            "used": Gauge(lambda: psutil.virtual_memory().used),
            "available": Gauge(lambda: psutil.virtual_memory().available),
            "percent": Gauge(lambda: psutil.virtual_memory().percent),
        },
    }


def _thread_states() -> Dict[str, int]:
    threads = threading.enumerate()
    daemon = sum(1 for t in threads if t.daemon)
    return {"count": len(threads), "daemon": daemon, "non_daemon": len(threads) - daemon}


def threads_bundle() -> Dict[str, Any]:
    """Thread counts, refreshed at most every THREAD_STATES_CACHE_SECONDS."""
    census = CachedGauge(_thread_states, THREAD_STATES_CACHE_SECONDS)
    return {
        "count": Gauge(lambda: census.value["count"]),
        "daemon.count": Gauge(lambda: census.value["daemon"]),
        "non_daemon.count": Gauge(lambda: census.value["non_daemon"]),
    }


def process_bundle() -> Dict[str, Any]:
    """CPU usage, OS thread count and open file descriptors of this process."""
    process = psutil.Process()
    bundle: Dict[str, Any] = {
        "cpu.percent": Gauge(lambda: process.cpu_percent(interval=None)),
        "threads": Gauge(lambda: process.num_threads()),
    }
    # num_fds only exists on POSIX
    if hasattr(process, "num_fds"):
        bundle["fds"] = Gauge(lambda: process.num_fds())
    return bundle


PROVIDERS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "gc": gc_bundle,
    "memory": memory_bundle,
    "threads": threads_bundle,
    "process": process_bundle,
}
