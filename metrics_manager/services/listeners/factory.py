from typing import Callable, Dict, List

from .base import MetricListener


class ListenerFactory:
    """Registry for creating MetricListener instances from their identifier."""
    _registry: Dict[str, Callable[[], MetricListener]] = {}

    @classmethod
    def register(cls, identifier: str):
        """Decorator to register a listener class or zero-argument builder."""
        def decorator(builder: Callable[[], MetricListener]):
            cls._registry[identifier] = builder
            return builder
        return decorator

    @classmethod
    def unregister(cls, identifier: str) -> None:
        cls._registry.pop(identifier, None)

    @classmethod
    def available(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, identifier: str) -> MetricListener:
        """Instantiates a listener using the registered builder."""
        if identifier not in cls._registry:
            raise ValueError(f"Unknown metric listener: {identifier}")

        listener = cls._registry[identifier]()
        if not isinstance(listener, MetricListener):
            raise TypeError(f"Builder for {identifier} returned {type(listener).__name__}, not a MetricListener")
        return listener
