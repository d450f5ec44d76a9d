"""
Tests for the ListenerFactory and the built-in listeners.
"""

import json

import pytest

from metrics_manager.services.listeners import (
    ConsoleMetricListener,
    InMemoryMetricListener,
    ListenerFactory,
    MetricListener,
)


def test_builtin_listeners_are_registered():
    assert {"console", "memory"} <= set(ListenerFactory.available())
    assert isinstance(ListenerFactory.create("console"), ConsoleMetricListener)
    assert isinstance(ListenerFactory.create("memory"), InMemoryMetricListener)


def test_create_returns_a_new_instance_each_time():
    assert ListenerFactory.create("memory") is not ListenerFactory.create("memory")


def test_create_unknown_identifier_raises():
    with pytest.raises(ValueError):
        ListenerFactory.create("io.example.MissingListener")


def test_register_builder_function():
    @ListenerFactory.register("prebuilt-memory")
    def build():
        return InMemoryMetricListener(max_updates=3)

    try:
        listener = ListenerFactory.create("prebuilt-memory")
        assert listener.updates.maxlen == 3
    finally:
        ListenerFactory.unregister("prebuilt-memory")


def test_builder_returning_wrong_type_raises():
    ListenerFactory.register("not-a-listener")(dict)
    try:
        with pytest.raises(TypeError):
            ListenerFactory.create("not-a-listener")
    finally:
        ListenerFactory.unregister("not-a-listener")


def test_listener_contract_is_abstract():
    with pytest.raises(TypeError):
        MetricListener()


def test_console_listener_writes_json_lines(capsys):
    listener = ConsoleMetricListener()
    listener.init({"application.id": "billing"})

    listener.update_metric("requests", 5)
    listener.update_metric("latency-mean-value", 1.5)
    listener.close()

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["monitor"] == "requests"
    assert first["value"] == 5
    assert first["app_id"] == "billing"
    assert isinstance(first["timestamp"], int)


def test_memory_listener_keeps_latest_and_log():
    listener = InMemoryMetricListener(max_updates=2)
    listener.init({"application.id": "billing"})

    listener.update_metric("a", 1)
    listener.update_metric("a", 2)
    listener.update_metric("b", 3)

    assert listener.app_id == "billing"
    assert listener.values() == {"a": 2, "b": 3}
    assert [(name, value) for _, name, value in listener.updates] == [("a", 2), ("b", 3)]
    assert listener.last_update_ts > 0

    listener.close()
    assert listener.closed is True
