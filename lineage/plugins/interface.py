"""
Interface hook - enforces ``implements`` declarations.

    implements = {"send": ["string", Transport]}

Every declared method must exist on the instance when it is created;
each one is then wrapped so arguments are checked against their hints on
every call.
"""

from __future__ import annotations

import logging
from typing import Any

from ..blueprint import MethodContract
from ..faults import MissingMethodError
from ..instance import Instance, has_member
from .wrappers import ContractedMethod

logger = logging.getLogger("lineage.plugins.interface")


def require_method(instance: Instance, method: str, source: str) -> Any:
    """Return the (bound) method or raise :class:`MissingMethodError`."""
    if not has_member(instance, method):
        raise MissingMethodError(method, source=source)
    value = getattr(instance, method)
    if not callable(value):
        raise MissingMethodError(method, source=source)
    return value


def enforce_interface(instance: Instance, call: Any) -> None:
    """Hook: wrap every method named in ``implements``."""
    if not call.config.enforce_interfaces:
        return
    for method, hints in instance.__declaration__.implements.items():
        original = require_method(instance, method, "interface")
        wrapper = ContractedMethod(method, original, MethodContract(on_entry=hints), source="interface")
        setattr(instance, method, wrapper)
        logger.debug("Wrapped %s with interface hints %r", method, hints)
