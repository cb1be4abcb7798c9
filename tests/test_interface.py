"""
Tests for interface enforcement (plugins/interface.py).
"""

import pytest

from lineage.config import LineageConfig
from lineage.factory import Factory
from lineage.faults import ContractViolationError, MissingMethodError, TypeMismatchError
from lineage.plugins import ContractedMethod


def Transport():
    return {}


def Unrelated():
    return {}


def Sender():
    return {
        "implements": {"send": ["string", Transport]},
        "send": lambda self, message, transport: f"sent {message}",
    }


def Incomplete():
    return {"implements": {"send": ["string"]}}


class TestInterface:

    def test_conforming_call(self, factory):
        sender = factory.create(Sender)
        assert sender.send("hi", factory.create(Transport)) == "sent hi"

    def test_primitive_violation(self, factory):
        sender = factory.create(Sender)
        with pytest.raises(TypeMismatchError) as exc_info:
            sender.send(42, factory.create(Transport))
        err = exc_info.value
        assert err.position == 1
        assert err.requirement == "kind"
        assert str(err).endswith("Argument #1 of method 'send' is required to be a 'string'")

    def test_lineage_violation(self, factory):
        sender = factory.create(Sender)
        with pytest.raises(TypeMismatchError) as exc_info:
            sender.send("hi", factory.create(Unrelated))
        assert exc_info.value.position == 2
        assert "violates the implemented interface" in str(exc_info.value)

    def test_none_argument_skips_check(self, factory):
        sender = factory.create(Sender)
        assert sender.send(None, None) == "sent None"

    def test_fewer_arguments_than_hints(self, factory):
        def Lenient():
            return {
                "implements": {"log": ["string", "number"]},
                "log": lambda self, *parts: len(parts),
            }

        assert factory.create(Lenient).log("only") == 1

    def test_missing_method_at_creation(self, factory):
        with pytest.raises(MissingMethodError) as exc_info:
            factory.create(Incomplete)
        assert isinstance(exc_info.value, ContractViolationError)
        assert "Implemented interface requires 'send' method" in str(exc_info.value)

    def test_non_callable_member_is_missing(self, factory):
        with pytest.raises(MissingMethodError):
            factory.create(lambda: {"implements": {"send": []}, "send": "text"})

    def test_method_supplied_by_parent(self, factory):
        def Child():
            return {"parent": Sender}

        child = factory.create(Child)
        with pytest.raises(TypeMismatchError):
            child.send(1, None)

    def test_wrapper_is_own_property(self, factory):
        sender = factory.create(Sender)
        assert isinstance(vars(sender)["send"], ContractedMethod)
        assert not isinstance(sender.__members__["send"], ContractedMethod)

    def test_disabled_by_config(self, registry):
        factory = Factory(registry=registry, config=LineageConfig(enforce_interfaces=False))
        factory.create(Incomplete)
        assert factory.create(Sender).send(1, 2) == "sent 1"
