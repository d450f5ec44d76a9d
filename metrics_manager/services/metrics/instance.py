"""Module-level singleton accessor for the metrics manager.

Host code reaches the active engine through ``get_metrics_manager()``; the
application lifespan installs the configured one with
``set_metrics_manager()``. Until then a disabled manager is in place.
"""

from .manager import MetricsManager

# Module-level singleton instance - starts as a disabled manager
_manager: MetricsManager = MetricsManager()


def get_metrics_manager() -> MetricsManager:
    """Get the currently active metrics manager."""
    return _manager


def set_metrics_manager(manager: MetricsManager) -> None:
    """Replace the active metrics manager.

    Args:
        manager: The metrics manager instance to use
    """
    global _manager
    _manager = manager
