"""InMemoryMetricListener - keeps dispatched fields in process memory.

Backs the ``GET /api/v1/metrics/`` endpoint and is handy in tests.
"""

import threading
import time
from collections import deque
from typing import Any, Deque, Dict, Optional, Tuple

from metrics_manager.core.config import APPLICATION_ID
from .base import MetricListener
from .factory import ListenerFactory

# Number of (ts, field, value) entries kept in the update log
MAX_UPDATES = 10000


@ListenerFactory.register("memory")
class InMemoryMetricListener(MetricListener):
    """Latest value per field plus a bounded log of recent updates."""

    def __init__(self, max_updates: int = MAX_UPDATES):
        self.app_id: Optional[str] = None
        self.config: Dict[str, Any] = {}
        self.latest: Dict[str, Any] = {}
        self.updates: Deque[Tuple[float, str, Any]] = deque(maxlen=max_updates)
        self.last_update_ts: float = 0.0
        self.closed = False
        self._lock = threading.Lock()

    def name(self) -> str:
        return "memory"

    def init(self, config: Dict[str, Any]) -> None:
        self.config = config
        self.app_id = config.get(APPLICATION_ID)

    def update_metric(self, metric_name: str, value: Any) -> None:
        now = time.time()
        with self._lock:
            self.latest[metric_name] = value
            self.updates.append((now, metric_name, value))
            self.last_update_ts = now

    def values(self) -> Dict[str, Any]:
        """Copy of the latest value per field."""
        with self._lock:
            return dict(self.latest)

    def close(self) -> None:
        self.closed = True
