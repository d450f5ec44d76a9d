"""MetricsManager - registration ledger, listener loading and lifecycle.

The manager owns the InstrumentRegistry, the set of names registered through
its own API (the ledger), the configured listeners and the scheduler thread.

Instruments contributed by the built-in provider bundles are registered
straight into the registry and never enter the ledger: ``remove()`` refuses
them and ``clean()`` leaves them in place. They still count as taken names
for ``register()``.
"""

import threading
from typing import Any, List, Mapping, Optional, Set

from pydantic import ValidationError

from metrics_manager.core.logging_config import get_logger
from metrics_manager.services.listeners import ListenerFactory, MetricListener
from .dispatcher import send_all_metrics
from .models import EngineConfig, LifecycleState
from .providers import PROVIDERS
from .registry import InstrumentRegistry
from .scheduler import MetricsScheduler

logger = get_logger(__name__)


class MetricsManager:
    """Periodic sampler of an InstrumentRegistry fanning out to listeners.

    Construction never raises. A manager that is disabled in its
    configuration, whose configuration is invalid, or that ends up without
    any listener stays DISABLED: it never samples and every mutating call is
    a logged no-op.

    Args:
        config: Mapping using the dotted keys of metrics_manager.core.config
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.registry = InstrumentRegistry()
        self.listeners: List[MetricListener] = []
        self.config = EngineConfig()
        self.state = LifecycleState.DISABLED
        self._registered_metrics: Set[str] = set()
        self._scheduler: Optional[MetricsScheduler] = None
        self._lifecycle_lock = threading.Lock()

        try:
            self.config = EngineConfig.model_validate(dict(config or {}))
        except ValidationError as e:
            logger.error(f"Invalid metrics configuration, metrics are disabled: {e}")
            return

        if not self.config.enabled:
            logger.info("Metrics are disabled by configuration")
            return

        self._load_listeners()
        self._register_providers()

        logger.info(f"Start MetricsManager with listeners {[listener.name() for listener in self.listeners]}")

        if not self.listeners:
            logger.warning("Stop MetricsManager because it doesn't have listeners!")
            return

        self.state = LifecycleState.RUNNING

    def _load_listeners(self) -> None:
        for identifier in self.config.listeners:
            try:
                listener = ListenerFactory.create(identifier)
            except ValueError:
                logger.error(f"Couldn't find the metric listener {identifier}")
                continue
            except Exception as e:
                logger.error(f"Couldn't create the metric listener {identifier}: {e}")
                continue

            try:
                listener.init(self.config.to_listener_config())
            except Exception as e:
                logger.error(f"Couldn't initialize the metric listener {identifier}: {e}")
                continue

            self.listeners.append(listener)

    def _register_providers(self) -> None:
        for bundle_name in self.config.providers:
            provider = PROVIDERS.get(bundle_name)
            if provider is None:
                logger.error(f"Unknown metrics provider bundle {bundle_name}")
                continue
            try:
                self.registry.register_all(bundle_name, provider())
            except Exception as e:
                logger.error(f"Couldn't register the metrics provider bundle {bundle_name}: {e}")

    @property
    def is_running(self) -> bool:
        return self.state == LifecycleState.RUNNING

    @property
    def app_id(self) -> Optional[str]:
        return self.config.application_id

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    @property
    def registered_metrics(self) -> Set[str]:
        """Copy of the ledger: names added through ``register()``."""
        with self.registry.lock:
            return set(self._registered_metrics)

    @property
    def scheduler_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_alive

    def register(self, metric_name: str, instrument: Any) -> bool:
        """Register an instrument under a name no other instrument uses.

        Returns:
            True if the instrument was added
        """
        with self.registry.lock:
            if not self.is_running:
                logger.warning(f"Tried to register metric [{metric_name}] but metrics are {self.state.value}")
                return False

            if metric_name in self._registered_metrics or metric_name in self.registry:
                logger.warning(f"The metric with name [{metric_name}] is duplicated!")
                return False

            try:
                self.registry.register(metric_name, instrument)
            except ValueError as e:
                logger.warning(f"Couldn't register metric [{metric_name}]: {e}")
                return False

            self._registered_metrics.add(metric_name)
            return True

    def remove(self, metric_name: str) -> bool:
        """Remove an instrument previously added with ``register()``.

        Returns:
            True if the instrument was removed
        """
        with self.registry.lock:
            if not self.is_running:
                logger.warning(f"Tried to remove metric [{metric_name}] but metrics are {self.state.value}")
                return False

            if metric_name not in self._registered_metrics:
                logger.warning(f"Tried to remove unregistered metric [{metric_name}]")
                return False

            self.registry.remove(metric_name)
            self._registered_metrics.discard(metric_name)
            return True

    def clean(self) -> None:
        """Remove every ledger instrument. Provider bundle instruments stay."""
        with self.registry.lock:
            for metric_name in self._registered_metrics:
                self.registry.remove(metric_name)
            self._registered_metrics.clear()

    def send_all_metrics(self) -> int:
        """Run one dispatch pass to every listener."""
        return send_all_metrics(self.registry, self.listeners, self.config.verbose)

    def start(self) -> None:
        """Start the sampling thread. Only a RUNNING manager samples."""
        with self._lifecycle_lock:
            if not self.is_running:
                logger.warning(f"Tried to start MetricsManager but metrics are {self.state.value}")
                return
            if self._scheduler is not None:
                logger.warning("MetricsManager already started")
                return

            self._scheduler = MetricsScheduler(self, self.config.interval)
            self._scheduler.start()

    def stop(self) -> None:
        """Stop sampling and close every listener.

        Returns without waiting for an in-flight pass; use
        ``await_stopped()`` to join the scheduler thread.
        """
        with self._lifecycle_lock:
            if not self.is_running:
                logger.debug(f"MetricsManager stop ignored, metrics are {self.state.value}")
                return
            self.state = LifecycleState.STOPPED

        if self._scheduler is not None:
            self._scheduler.request_stop()

        for listener in self.listeners:
            try:
                listener.close()
            except Exception as e:
                logger.error(f"Couldn't close the metric listener {listener.name()}: {e}")

        logger.info("Stop MetricsManager")

    def await_stopped(self, timeout: Optional[float] = None) -> bool:
        """Wait for the scheduler thread to exit."""
        if self._scheduler is None:
            return True
        return self._scheduler.await_stopped(timeout)
