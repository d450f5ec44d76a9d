"""Pydantic V2 models for the engine configuration and the metrics API.

EngineConfig is an immutable snapshot of the configuration mapping the
MetricsManager is constructed with. The remaining models serialize engine
state for the REST endpoints.
"""

import copy
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from metrics_manager.core.config import (
    APPLICATION_ID,
    METRIC_ENABLE,
    METRIC_INTERVAL,
    METRIC_LISTENERS,
    METRIC_PROVIDERS,
    METRIC_VERBOSE_MODE,
)

DEFAULT_LISTENERS = ["console"]
DEFAULT_PROVIDERS = ["gc", "memory", "threads", "process"]


class LifecycleState(str, Enum):
    DISABLED = "disabled"
    RUNNING = "running"
    STOPPED = "stopped"


class EngineConfig(BaseModel):
    """Engine configuration, read from dotted keys such as ``metric.interval``.

    Keys the engine does not know about are kept so they reach the
    listeners, which may need their own options.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    enabled: bool = Field(False, alias=METRIC_ENABLE)
    interval: int = Field(60000, alias=METRIC_INTERVAL, gt=0)
    application_id: Optional[str] = Field(None, alias=APPLICATION_ID)
    verbose: bool = Field(False, alias=METRIC_VERBOSE_MODE)
    listeners: List[str] = Field(default_factory=lambda: list(DEFAULT_LISTENERS), alias=METRIC_LISTENERS)
    providers: List[str] = Field(default_factory=lambda: list(DEFAULT_PROVIDERS), alias=METRIC_PROVIDERS)

    @field_validator("listeners", "providers", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        # An explicit null means "none", a string is a comma separated list
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    def to_listener_config(self) -> Dict[str, Any]:
        """Fresh copy of the full configuration, keyed by the dotted names."""
        return copy.deepcopy(self.model_dump(by_alias=True))


class MetricsHealthModel(BaseModel):
    """Lightweight engine status - always served, even when disabled"""
    model_config = ConfigDict(from_attributes=True)

    metrics_enabled: bool
    state: LifecycleState
    scheduler_running: bool
    listeners: List[str]
    instrument_count: int
    registered_count: int
    interval_ms: int
    verbose: bool
    version: str


class LatestMetricsModel(BaseModel):
    """Last value dispatched for every field"""
    model_config = ConfigDict(from_attributes=True)

    timestamp: float
    app_id: Optional[str] = None
    metrics: Dict[str, Any]
