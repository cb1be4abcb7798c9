"""
Lineage faults - typed errors raised by the composition engine.

Every fault is raised synchronously at the point of violation and
propagates to the immediate caller. Each one also derives from the closest
built-in exception, so ``except TypeError`` keeps working.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- Composition and contract faults
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    LineageFault,
    ArgumentError,
    InvalidBlueprintError,
    BlueprintCycleError,
    ChainDepthError,
    ContractFault,
    InvalidHintError,
    ContractViolationError,
    MissingMethodError,
    TypeMismatchError,
    ReturnTypeMismatchError,
    RangeViolationError,
    ConfigError,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Composition
    "LineageFault",
    "ArgumentError",
    "InvalidBlueprintError",
    "BlueprintCycleError",
    "ChainDepthError",

    # Contract
    "ContractFault",
    "InvalidHintError",
    "ContractViolationError",
    "MissingMethodError",
    "TypeMismatchError",
    "ReturnTypeMismatchError",
    "RangeViolationError",

    # Config
    "ConfigError",
]
