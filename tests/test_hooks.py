"""
Tests for the hook pipeline (hooks.py).
"""

import pytest

from lineage.factory import Factory
from lineage.hooks import Hook, HookRegistry, get_default_registry, register_hook


def Marker():
    return {}


def Marked():
    return {"parent": Marker}


def Plain():
    return {"ready": True}


class TestHookRegistry:

    def test_register_returns_hook(self):
        registry = HookRegistry()

        def audit(instance, call):
            pass

        hook = registry.register(audit, declares="contract")
        assert isinstance(hook, Hook)
        assert hook.name.endswith("audit")
        assert hook.declares == ("contract",)
        assert registry.hooks == (hook,)

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            HookRegistry().register("not callable")

    def test_no_deduplication(self):
        registry = HookRegistry()
        calls = []
        hook = lambda inst, call: calls.append(1)  # noqa: E731
        registry.register(hook)
        registry.register(hook)
        Factory(registry=registry).create(Plain)
        assert calls == [1, 1]

    def test_dispatch_order_equals_registration_order(self):
        registry = HookRegistry()
        calls = []
        registry.register(lambda inst, call: calls.append("a"), name="a")
        registry.register(lambda inst, call: calls.append("b"), name="b")
        registry.register(lambda inst, call: calls.append("c"), name="c")
        factory = Factory(registry=registry)
        factory.create(Plain)
        factory.create(Plain)
        assert calls == ["a", "b", "c", "a", "b", "c"]
        assert [h.name for h in registry] == ["a", "b", "c"]

    def test_hooks_run_for_final_instance_only(self):
        registry = HookRegistry()
        seen = []
        registry.register(lambda inst, call: seen.append(inst))
        inst = Factory(registry=registry).create(Marked)
        assert seen == [inst]

    def test_hook_exception_propagates(self):
        registry = HookRegistry()

        def boom(instance, call):
            raise ValueError("rejected")

        registry.register(boom)
        with pytest.raises(ValueError, match="rejected"):
            Factory(registry=registry).create(Plain)


class TestHookRequirements:

    def test_lineage_requirement(self):
        registry = HookRegistry()
        seen = []
        registry.register(lambda inst, call: seen.append(call.blueprint), lineage=Marker)
        factory = Factory(registry=registry)
        factory.create(Plain)
        factory.create(Marked)
        assert seen == [Marked]

    def test_member_requirement(self):
        registry = HookRegistry()
        seen = []
        registry.register(lambda inst, call: seen.append(call.blueprint), members=["ready"])
        factory = Factory(registry=registry)
        factory.create(Marked)
        factory.create(Plain)
        assert seen == [Plain]

    def test_declares_requirement(self):
        registry = HookRegistry()
        seen = []
        registry.register(lambda inst, call: seen.append(call.blueprint), declares="mixins")
        factory = Factory(registry=registry)
        factory.create(Plain)
        factory.create(lambda: {"mixins": [{"x": 1}]})
        assert len(seen) == 1

    def test_describe(self):
        hook = HookRegistry().register(lambda i, c: None, declares="contract", members=("run",), lineage=Marker)
        assert hook.describe() == "declares=contract members=run lineage=Marker"
        assert HookRegistry().register(lambda i, c: None).describe() == "all instances"


class TestDefaultRegistry:

    def test_builtin_hooks_in_order(self):
        names = [hook.name for hook in get_default_registry()]
        assert names[:3] == ["mixins", "interface", "contract"]

    def test_register_hook_decorator(self):
        registry = get_default_registry()
        before = len(registry)

        @register_hook(name="tests.noop", lineage=Marker)
        def noop(instance, call):
            pass

        assert len(registry) == before + 1
        assert registry.hooks[-1].name == "tests.noop"
        assert noop.__name__ == "noop"
