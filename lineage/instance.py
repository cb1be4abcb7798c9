"""
Instance - the object produced by the factory.

An instance owns its own properties (``vars(instance)``) and a member
table materialized from its whole delegation chain when it was built.
Attribute lookup consults own properties first, then the member table.
Plain functions found in either layer are bound to the instance on
access, the same way functions in a class body become methods;
``staticmethod`` opts out.

Helpers live at module level rather than on the class so that no
member name is ever shadowed by an API method.
"""

from __future__ import annotations

import types
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


_BINDABLE = (types.FunctionType, staticmethod, classmethod)


def source_of(blueprint: Any) -> Any:
    """Return the identity a blueprint is known by in lineages."""
    return getattr(blueprint, "__lineage_source__", blueprint)


def name_of(blueprint: Any) -> str:
    """Human-readable name for a blueprint (used in faults and logs)."""
    name = getattr(blueprint, "__lineage_name__", None)
    if name:
        return name
    source = source_of(blueprint)
    name = getattr(source, "__qualname__", None) or getattr(source, "__name__", None)
    if name:
        return name
    return f"<{type(source).__name__} blueprint at {id(source):#x}>"


def _bind(value: Any, instance: "Instance") -> Any:
    if isinstance(value, _BINDABLE):
        return value.__get__(instance, type(instance))
    return value


class Instance:
    """
    Object built by the factory from a blueprint chain.

    Attributes (reserved, dunder-named so they never collide with members):
        __lineage__: blueprint identities, most-derived first
        __members__: materialized member table, most-derived winning
        __declaration__: merged reserved-key declaration
    """

    __slots__ = ("__lineage__", "__members__", "__declaration__", "__dict__", "__weakref__")

    def __init__(
        self,
        members: Optional[Dict[str, Any]] = None,
        lineage: Tuple[Any, ...] = (),
        declaration: Any = None,
    ):
        object.__setattr__(self, "__members__", dict(members or {}))
        object.__setattr__(self, "__lineage__", tuple(lineage))
        object.__setattr__(self, "__declaration__", declaration)

    def __getattribute__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            return object.__getattribute__(self, name)

        own = object.__getattribute__(self, "__dict__")
        if name in own:
            return _bind(own[name], self)

        members = object.__getattribute__(self, "__members__")
        if name in members:
            return _bind(members[name], self)

        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        lineage = object.__getattribute__(self, "__lineage__")
        label = name_of(lineage[0]) if lineage else "Instance"
        raise AttributeError(f"'{label}' instance has no member '{name}'")

    def __dir__(self) -> list:
        return sorted(set(self.__members__) | set(self.__dict__))

    def __repr__(self) -> str:
        label = name_of(self.__lineage__[0]) if self.__lineage__ else "Instance"
        return f"<{label} instance members={len(self.__members__)} own={len(self.__dict__)}>"


# ============================================================================
# Introspection helpers
# ============================================================================

def lineage_of(instance: Instance) -> Tuple[Any, ...]:
    """Blueprint identities of the instance's chain, most-derived first."""
    return instance.__lineage__


def declaration_of(instance: Instance) -> Any:
    """Merged :class:`~lineage.blueprint.Declaration` of the instance."""
    return instance.__declaration__


def own_members(instance: Instance) -> Dict[str, Any]:
    """The instance's own properties (not the delegation chain)."""
    return vars(instance)


def chain_members(instance: Instance) -> Mapping[str, Any]:
    """Read-only view of the materialized delegation-chain member table."""
    return types.MappingProxyType(instance.__members__)


def has_own(instance: Instance, name: str) -> bool:
    return name in vars(instance)


def has_member(instance: Instance, name: str) -> bool:
    """True if ``name`` resolves on the instance (own or chain)."""
    return name in vars(instance) or name in instance.__members__


def iter_members(instance: Instance) -> Iterator[Tuple[str, Any]]:
    """Yield ``(name, value)`` for every resolvable member, own values winning."""
    own = vars(instance)
    for key, value in instance.__members__.items():
        if key not in own:
            yield key, value
    yield from own.items()


def is_instance_of(value: Any, blueprint: Any) -> bool:
    """Delegation-chain membership test."""
    if not isinstance(value, Instance):
        return False
    target = source_of(blueprint)
    return any(link is target for link in value.__lineage__)
