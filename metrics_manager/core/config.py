import os
from typing import Any, Dict, List

# Configuration keys understood by the metrics engine
METRIC_ENABLE = "metric.enable"
METRIC_INTERVAL = "metric.interval"
APPLICATION_ID = "application.id"
METRIC_VERBOSE_MODE = "metric.verbose.mode"
METRIC_LISTENERS = "metric.listeners"
METRIC_PROVIDERS = "metric.providers"


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    # API Settings
    PROJECT_NAME: str = "Metrics Manager"
    VERSION: str = "0.1.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8005))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Metrics engine settings
    METRICS_ENABLE: bool = os.getenv("METRICS_ENABLE", "false").lower() == "true"
    METRICS_INTERVAL_MS: int = int(os.getenv("METRICS_INTERVAL_MS", 60000))
    APPLICATION_ID: str = os.getenv("APPLICATION_ID", "")
    METRICS_VERBOSE: bool = os.getenv("METRICS_VERBOSE", "false").lower() == "true"
    METRICS_LISTENERS: List[str] = _split_list(os.getenv("METRICS_LISTENERS", "console"))
    METRICS_PROVIDERS: List[str] = _split_list(os.getenv("METRICS_PROVIDERS", "gc,memory,threads,process"))

    def metrics_config(self) -> Dict[str, Any]:
        """Engine configuration mapping built from the environment."""
        config: Dict[str, Any] = {
            METRIC_ENABLE: self.METRICS_ENABLE,
            METRIC_INTERVAL: self.METRICS_INTERVAL_MS,
            METRIC_VERBOSE_MODE: self.METRICS_VERBOSE,
            METRIC_LISTENERS: list(self.METRICS_LISTENERS),
            METRIC_PROVIDERS: list(self.METRICS_PROVIDERS),
        }
        if self.APPLICATION_ID:
            config[APPLICATION_ID] = self.APPLICATION_ID
        return config


settings = Settings()
