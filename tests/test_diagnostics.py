"""
Tests for factory diagnostics (diagnostics.py).
"""

import logging

from lineage.diagnostics import (
    CompositionEvent,
    CompositionEventType,
    Diagnostics,
    LoggingDiagnosticListener,
)
from lineage.factory import Factory
from lineage.hooks import HookRegistry
from lineage.plugins import register_builtin_hooks


def Base():
    return {}


def Derived():
    return {"parent": Base, "mixins": [{"x": 1}]}


class TestDiagnostics:

    def test_disabled_without_listeners(self):
        diag = Diagnostics()
        assert diag.enabled is False
        diag.emit(CompositionEventType.BUILD, blueprint="B")

    def test_factory_events(self, registry, diagnostics, recorder):
        factory = Factory(registry=registry, diagnostics=diagnostics)
        factory.create(Derived)

        builds = recorder.of_type(CompositionEventType.BUILD)
        assert [e.blueprint for e in builds] == ["Base", "Derived"]
        assert builds[0].metadata["trace"] == ["Derived", "Base"]

        dispatched = recorder.of_type(CompositionEventType.HOOK_DISPATCH)
        assert [e.hook for e in dispatched] == ["mixins"]

        complete = recorder.of_type(CompositionEventType.CREATE_COMPLETE)
        assert len(complete) == 1
        assert complete[0].duration >= 0

    def test_hook_registered_events(self, diagnostics, recorder):
        registry = HookRegistry(diagnostics=diagnostics)
        register_builtin_hooks(registry)
        events = recorder.of_type(CompositionEventType.HOOK_REGISTERED)
        assert [(e.hook, e.metadata["position"]) for e in events] == [
            ("mixins", 0), ("interface", 1), ("contract", 2),
        ]

    def test_listener_errors_do_not_break_construction(self, registry, caplog):
        class Broken:
            def on_event(self, event):
                raise RuntimeError("listener down")

        diag = Diagnostics()
        diag.add_listener(Broken())
        factory = Factory(registry=registry, diagnostics=diag)
        with caplog.at_level(logging.ERROR, logger="lineage.diagnostics"):
            assert factory.create(Derived).x == 1
        assert "listener down" in caplog.text


class TestLoggingListener:

    def test_writes_to_logger(self, caplog):
        listener = LoggingDiagnosticListener(log_level=logging.INFO)
        with caplog.at_level(logging.INFO, logger="lineage.diagnostics"):
            listener.on_event(CompositionEvent(type=CompositionEventType.BUILD, blueprint="Base"))
            listener.on_event(CompositionEvent(
                type=CompositionEventType.CREATE_COMPLETE, blueprint="Base", duration=0.5,
            ))
        assert "Built level 'Base'" in caplog.text
        assert "Created 'Base' in 0.500000s" in caplog.text
