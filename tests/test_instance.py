"""
Tests for instances and introspection helpers (instance.py).
"""

import pytest

from lineage.instance import (
    Instance,
    chain_members,
    has_member,
    has_own,
    iter_members,
    own_members,
)


def Greeter(name):
    return {
        "name": name,
        "greet": lambda self: f"hello {self.name}",
        "shout": staticmethod(lambda text: text.upper()),
    }


class TestInstanceLookup:

    def test_functions_bound_on_access(self, factory):
        inst = factory.create(Greeter, ["ada"])
        assert inst.greet() == "hello ada"

    def test_staticmethod_not_bound(self, factory):
        inst = factory.create(Greeter, ["ada"])
        assert inst.shout("hi") == "HI"

    def test_own_props_shadow_members(self, factory):
        inst = factory.create(Greeter, ["ada"])
        inst.name = "grace"
        assert inst.greet() == "hello grace"
        assert chain_members(inst)["name"] == "ada"

    def test_own_function_is_bound(self, factory):
        inst = factory.create(Greeter, ["ada"])
        inst.wave = lambda self: f"{self.name} waves"
        assert inst.wave() == "ada waves"

    def test_missing_member(self, factory):
        inst = factory.create(Greeter, ["ada"])
        with pytest.raises(AttributeError) as exc_info:
            inst.unknown
        assert "'Greeter' instance has no member 'unknown'" in str(exc_info.value)

    def test_siblings_do_not_share_own_props(self, factory):
        first = factory.create(Greeter, ["a"])
        second = factory.create(Greeter, ["b"])
        first.extra = 1
        assert not has_member(second, "extra")


class TestInstanceHelpers:

    def test_has_own_vs_has_member(self, factory):
        inst = factory.create(Greeter, ["ada"])
        inst.mood = "happy"
        assert has_own(inst, "mood")
        assert not has_own(inst, "name")
        assert has_member(inst, "name")

    def test_chain_members_read_only(self, factory):
        inst = factory.create(Greeter, ["ada"])
        with pytest.raises(TypeError):
            chain_members(inst)["name"] = "x"

    def test_iter_members_own_values_win(self, factory):
        inst = factory.create(Greeter, ["ada"])
        inst.name = "grace"
        members = dict(iter_members(inst))
        assert members["name"] == "grace"
        assert set(members) == {"name", "greet", "shout"}

    def test_own_members(self, factory):
        inst = factory.create(Greeter, ["ada"])
        assert own_members(inst) == {}

    def test_dir_and_repr(self, factory):
        inst = factory.create(Greeter, ["ada"])
        assert {"name", "greet", "shout"} <= set(dir(inst))
        assert repr(inst).startswith("<Greeter instance")

    def test_bare_instance(self):
        inst = Instance({"x": 1})
        assert inst.x == 1
        assert "Instance" in repr(inst)
