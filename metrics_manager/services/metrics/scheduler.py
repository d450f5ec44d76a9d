"""MetricsScheduler - background thread driving periodic dispatch passes.

The scheduler only knows how to call ``manager.send_all_metrics()`` every
interval; engine state lives in the MetricsManager. A scheduler runs once:
after it stops, a new manager has to be built.
"""

import threading
from typing import Optional, TYPE_CHECKING

from metrics_manager.core.logging_config import get_logger

if TYPE_CHECKING:
    from .manager import MetricsManager

logger = get_logger(__name__)


class MetricsScheduler:
    """Owns the sampling thread of one MetricsManager.

    Args:
        manager: Engine whose ``send_all_metrics`` runs on every tick
        interval_ms: Time between two passes in milliseconds
    """

    def __init__(self, manager: "MetricsManager", interval_ms: int):
        self.manager = manager
        self.interval = interval_ms / 1000.0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        logger.info(f"Metrics scheduler started with a {self.interval:.3f}s interval")

        # Wait for the interval or until stop is requested, then sample
        while not self._stop_event.wait(timeout=self.interval):
            if not self.manager.is_running:
                break
            try:
                self.manager.send_all_metrics()
            except Exception as e:
                logger.error(f"Error in metrics dispatch pass: {e}")

        logger.info("Metrics scheduler stopped")

    def start(self) -> None:
        """Start the sampling thread."""
        if self._thread is not None:
            logger.warning("Metrics scheduler already started")
            return

        self._thread = threading.Thread(target=self._run, name="metrics-scheduler", daemon=True)
        self._thread.start()

    def request_stop(self) -> None:
        """Ask the loop to exit; an in-flight pass is allowed to finish."""
        self._stop_event.set()

    def await_stopped(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread to exit.

        Returns:
            True if the thread is not running anymore
        """
        if self._thread is None:
            return True
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
