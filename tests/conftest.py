import threading

import pytest

from metrics_manager.services.listeners import ListenerFactory, MetricListener
from metrics_manager.services.metrics.manager import MetricsManager


class RecordingListener(MetricListener):
    """Listener keeping every call it receives."""

    instances = []

    def __init__(self):
        self.calls = []
        self.config = None
        self.close_count = 0
        self._lock = threading.Lock()
        RecordingListener.instances.append(self)

    def name(self):
        return "recording"

    def init(self, config):
        self.config = config

    def update_metric(self, metric_name, value):
        with self._lock:
            self.calls.append((metric_name, value))

    def close(self):
        self.close_count += 1

    def snapshot_calls(self):
        with self._lock:
            return list(self.calls)

    def calls_for(self, metric_name):
        return [value for name, value in self.snapshot_calls() if name == metric_name]


@pytest.fixture
def recording_listener():
    """Register the "recording" listener identifier for the duration of a test."""
    ListenerFactory.register("recording")(RecordingListener)
    RecordingListener.instances = []
    yield RecordingListener
    ListenerFactory.unregister("recording")


@pytest.fixture
def make_manager(recording_listener):
    """Build managers with one recording listener and no provider bundles."""
    managers = []

    def _make(overrides=None):
        config = {
            "metric.enable": True,
            "metric.interval": 60000,
            "metric.listeners": ["recording"],
            "metric.providers": [],
        }
        config.update(overrides or {})
        manager = MetricsManager(config)
        managers.append(manager)
        return manager

    yield _make

    for manager in managers:
        manager.stop()
        manager.await_stopped(timeout=2.0)
