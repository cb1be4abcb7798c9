"""
Contract hook - design by contract for instance methods.

    contract = {
        "method_a": ["number", Dependency],
        "method_b": {
            "on_entry": ["number", Dependency],
            "validators": [lambda arg: arg > 10],
            "on_exit": "string",
        },
    }

A bare hint sequence is an entry-only contract.
"""

from __future__ import annotations

import logging
from typing import Any

from ..instance import Instance
from .interface import require_method
from .wrappers import ContractedMethod

logger = logging.getLogger("lineage.plugins.contract")


def enforce_contract(instance: Instance, call: Any) -> None:
    """Hook: wrap every method named in ``contract``."""
    if not call.config.enforce_contracts:
        return
    for method, contract in instance.__declaration__.contract.items():
        original = require_method(instance, method, "contract")
        setattr(instance, method, ContractedMethod(method, original, contract, source="contract"))
        logger.debug("Wrapped %s with contract %r", method, contract)
