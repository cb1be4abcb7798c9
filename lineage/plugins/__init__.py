"""
Built-in hooks: mixins, interfaces, contracts.

Registered, in that order, into the process-wide registry the first time
it is used. Mixins run first so that a trait can supply a method an
interface or contract requires.
"""

from .contract import enforce_contract
from .interface import enforce_interface, require_method
from .mixins import apply_mixins
from .wrappers import ContractedMethod


def register_builtin_hooks(registry) -> None:
    """Register the built-in hooks into ``registry``."""
    registry.register(apply_mixins, name="mixins", declares="mixins")
    registry.register(enforce_interface, name="interface", declares="implements")
    registry.register(enforce_contract, name="contract", declares="contract")


__all__ = [
    "ContractedMethod",
    "apply_mixins",
    "enforce_contract",
    "enforce_interface",
    "register_builtin_hooks",
    "require_method",
]
