"""Metrics REST API endpoints.

Exposes the last dispatched value of every field (through the "memory"
listener) and a health summary of the engine.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from metrics_manager.core.config import settings
from metrics_manager.services.listeners import InMemoryMetricListener
from metrics_manager.services.metrics.instance import get_metrics_manager
from metrics_manager.services.metrics.manager import MetricsManager
from metrics_manager.services.metrics.models import LatestMetricsModel, MetricsHealthModel

router = APIRouter(prefix="/metrics", tags=["metrics"])


def get_manager() -> MetricsManager:
    """FastAPI dependency for metrics manager injection."""
    return get_metrics_manager()


def _memory_listener(manager: MetricsManager) -> Optional[InMemoryMetricListener]:
    return next(
        (listener for listener in manager.listeners if isinstance(listener, InMemoryMetricListener)),
        None,
    )


@router.get("/", response_model=LatestMetricsModel)
async def get_latest_metrics(manager: MetricsManager = Depends(get_manager)):
    """Get the last value dispatched for every field.

    Raises:
        HTTPException: 503 if metrics are not running or the "memory"
            listener is not configured
    """
    if not manager.is_running:
        raise HTTPException(
            status_code=503,
            detail="Metrics are not running. Set METRICS_ENABLE=true to enable."
        )

    listener = _memory_listener(manager)
    if listener is None:
        raise HTTPException(
            status_code=503,
            detail="The 'memory' metric listener is not configured. Add it to METRICS_LISTENERS."
        )

    return LatestMetricsModel(
        timestamp=listener.last_update_ts,
        app_id=manager.app_id,
        metrics=listener.values(),
    )


@router.get("/health", response_model=MetricsHealthModel)
async def get_metrics_health(manager: MetricsManager = Depends(get_manager)):
    """Get engine health status.

    Always returns 200, even when metrics are disabled.
    """
    return MetricsHealthModel(
        metrics_enabled=manager.config.enabled,
        state=manager.state,
        scheduler_running=manager.scheduler_running,
        listeners=[listener.name() for listener in manager.listeners],
        instrument_count=len(manager.registry),
        registered_count=len(manager.registered_metrics),
        interval_ms=manager.config.interval,
        verbose=manager.config.verbose,
        version=settings.VERSION,
    )
