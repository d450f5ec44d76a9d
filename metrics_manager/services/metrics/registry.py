"""InstrumentRegistry - name to instrument mapping shared by all threads.

The registry is the only structure touched both by caller threads
(registration, removal) and by the scheduler thread (sampling). Every access
goes through a single re-entrant lock, which callers can also hold to make a
multi-step update atomic.
"""

import threading
from typing import Any, Dict, List, Mapping, Optional

from .instruments import (
    Counter, Gauge, Histogram, InstrumentKind, Meter, Timer, kind_of
)


class InstrumentRegistry:
    """Registry of named instruments, enumerable per kind."""

    def __init__(self):
        self.lock = threading.RLock()
        self._instruments: Dict[str, Any] = {}

    def register(self, name: str, instrument: Any) -> Any:
        """Add an instrument under a unique name.

        Raises:
            ValueError: If the name is taken or the object is not an instrument
        """
        if kind_of(instrument) is None:
            raise ValueError(f"Unsupported instrument type for {name}: {type(instrument).__name__}")
        with self.lock:
            if name in self._instruments:
                raise ValueError(f"An instrument named {name} already exists")
            self._instruments[name] = instrument
        return instrument

    def register_all(self, prefix: str, bundle: Mapping[str, Any]) -> List[str]:
        """Register a nested mapping of instruments under dotted names.

        ``register_all("gc", {"gen0": {"collections": g}})`` registers
        ``gc.gen0.collections``.

        Returns:
            The names that were registered
        """
        registered: List[str] = []
        for key, value in bundle.items():
            name = f"{prefix}.{key}" if prefix else key
            if isinstance(value, Mapping):
                registered.extend(self.register_all(name, value))
            else:
                self.register(name, value)
                registered.append(name)
        return registered

    def remove(self, name: str) -> bool:
        with self.lock:
            return self._instruments.pop(name, None) is not None

    def get(self, name: str, kind: Optional[InstrumentKind] = None) -> Optional[Any]:
        """Look up an instrument, optionally only if it is of the given kind."""
        with self.lock:
            instrument = self._instruments.get(name)
        if instrument is None or (kind is not None and kind_of(instrument) != kind):
            return None
        return instrument

    def names(self, kind: Optional[InstrumentKind] = None) -> List[str]:
        """Copy of the registered names, optionally restricted to one kind."""
        with self.lock:
            return [
                name for name, instrument in self._instruments.items()
                if kind is None or kind_of(instrument) == kind
            ]

    def _of_kind(self, kind: InstrumentKind) -> Dict[str, Any]:
        with self.lock:
            return {
                name: instrument for name, instrument in self._instruments.items()
                if kind_of(instrument) == kind
            }

    def gauges(self) -> Dict[str, Gauge]:
        return self._of_kind(InstrumentKind.GAUGE)

    def counters(self) -> Dict[str, Counter]:
        return self._of_kind(InstrumentKind.COUNTER)

    def meters(self) -> Dict[str, Meter]:
        return self._of_kind(InstrumentKind.METER)

    def histograms(self) -> Dict[str, Histogram]:
        return self._of_kind(InstrumentKind.HISTOGRAM)

    def timers(self) -> Dict[str, Timer]:
        return self._of_kind(InstrumentKind.TIMER)

    def __contains__(self, name: str) -> bool:
        with self.lock:
            return name in self._instruments

    def __len__(self) -> int:
        with self.lock:
            return len(self._instruments)
