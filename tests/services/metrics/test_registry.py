"""
Unit tests for InstrumentRegistry and the built-in provider bundles.
"""

import pytest

from metrics_manager.services.metrics.instruments import (
    Counter, Gauge, Histogram, InstrumentKind, Meter, Timer
)
from metrics_manager.services.metrics.providers import PROVIDERS
from metrics_manager.services.metrics.registry import InstrumentRegistry


def test_register_and_get_by_kind():
    registry = InstrumentRegistry()
    counter = registry.register("requests", Counter())

    assert "requests" in registry
    assert registry.get("requests") is counter
    assert registry.get("requests", InstrumentKind.COUNTER) is counter
    assert registry.get("requests", InstrumentKind.GAUGE) is None
    assert registry.get("missing") is None


def test_register_duplicate_name_raises():
    registry = InstrumentRegistry()
    registry.register("x", Gauge(lambda: 1))
    with pytest.raises(ValueError):
        registry.register("x", Counter())


def test_register_rejects_non_instruments():
    registry = InstrumentRegistry()
    with pytest.raises(ValueError):
        registry.register("x", 42)
    assert len(registry) == 0


def test_names_and_views_are_per_kind():
    registry = InstrumentRegistry()
    registry.register("g", Gauge(lambda: 1))
    registry.register("c", Counter())
    registry.register("m", Meter())
    registry.register("h", Histogram())
    registry.register("t", Timer())

    assert registry.names(InstrumentKind.GAUGE) == ["g"]
    assert registry.names(InstrumentKind.TIMER) == ["t"]
    assert sorted(registry.names()) == ["c", "g", "h", "m", "t"]
    assert list(registry.gauges()) == ["g"]
    assert list(registry.counters()) == ["c"]
    assert list(registry.meters()) == ["m"]
    assert list(registry.histograms()) == ["h"]
    assert list(registry.timers()) == ["t"]


def test_names_returns_a_copy():
    registry = InstrumentRegistry()
    registry.register("a", Counter())
    names = registry.names(InstrumentKind.COUNTER)
    registry.register("b", Counter())
    assert names == ["a"]


def test_remove():
    registry = InstrumentRegistry()
    registry.register("a", Counter())
    assert registry.remove("a") is True
    assert registry.remove("a") is False
    assert "a" not in registry


def test_register_all_flattens_nested_mappings():
    registry = InstrumentRegistry()
    names = registry.register_all("gc", {
        "gen0": {"collections": Gauge(lambda: 1), "collected": Gauge(lambda: 2)},
        "total": Counter(),
    })

    assert sorted(names) == ["gc.gen0.collected", "gc.gen0.collections", "gc.total"]
    assert registry.get("gc.gen0.collected").value == 2


@pytest.mark.parametrize("bundle_name", sorted(PROVIDERS))
def test_provider_bundles_register_readable_gauges(bundle_name):
    registry = InstrumentRegistry()
    names = registry.register_all(bundle_name, PROVIDERS[bundle_name]())

    assert names
    for name in names:
        assert name.startswith(f"{bundle_name}.")
        instrument = registry.get(name, InstrumentKind.GAUGE)
        assert instrument is not None
        assert isinstance(instrument.value, (int, float))


def test_gc_bundle_covers_every_generation():
    registry = InstrumentRegistry()
    registry.register_all("gc", PROVIDERS["gc"]())
    assert "gc.gen0.collections" in registry
    assert "gc.gen2.pending" in registry
