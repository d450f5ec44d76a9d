"""Output sinks for dispatched metric fields.

Importing this package registers the built-in listeners ("console" and
"memory") with the ListenerFactory.
"""

from .base import MetricListener
from .factory import ListenerFactory
from .console import ConsoleMetricListener
from .memory import InMemoryMetricListener

__all__ = [
    "MetricListener",
    "ListenerFactory",
    "ConsoleMetricListener",
    "InMemoryMetricListener",
]
