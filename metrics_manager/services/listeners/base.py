"""MetricListener - contract every output sink implements."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class MetricListener(ABC):
    """Sink receiving the fields dispatched by the MetricsManager.

    Listeners are built with no arguments by the ListenerFactory, then
    ``init`` is called once with a private copy of the engine configuration.
    ``update_metric`` may be called at high frequency from the scheduler
    thread, and possibly concurrently with ``close``.
    """

    @abstractmethod
    def name(self) -> str:
        """Stable identifier used in logs."""

    @abstractmethod
    def init(self, config: Dict[str, Any]) -> None:
        """One-time setup. Raising drops this listener from the engine."""

    @abstractmethod
    def update_metric(self, metric_name: str, value: Any) -> None:
        """Emit one field (``requests``, ``latency-max-value``, ...)."""

    @abstractmethod
    def close(self) -> None:
        """Release resources. Called once, when the engine stops."""
