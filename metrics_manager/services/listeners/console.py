import json
import sys
import time
from typing import Any, Dict, Optional

from metrics_manager.core.config import APPLICATION_ID
from .base import MetricListener
from .factory import ListenerFactory


@ListenerFactory.register("console")
class ConsoleMetricListener(MetricListener):
    """Writes one JSON line per field to stdout."""

    def __init__(self):
        self.app_id: Optional[str] = None

    def name(self) -> str:
        return "console"

    def init(self, config: Dict[str, Any]) -> None:
        self.app_id = config.get(APPLICATION_ID)

    def update_metric(self, metric_name: str, value: Any) -> None:
        line = {
            "timestamp": int(time.time()),
            "monitor": metric_name,
            "value": value,
            "app_id": self.app_id,
        }
        sys.stdout.write(json.dumps(line, default=str) + "\n")
        sys.stdout.flush()

    def close(self) -> None:
        sys.stdout.flush()
