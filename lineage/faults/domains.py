"""
Lineage faults - domain-specific fault types.

Provides concrete fault classes for each domain:
- COMPOSITION faults (factory calls, blueprints, delegation chains)
- CONTRACT faults (hints, interfaces, design-by-contract)
- CONFIG faults
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .core import Fault, FaultDomain, Severity


class LineageFault(Fault):
    """Base class for every fault raised by lineage."""

    domain = FaultDomain.COMPOSITION
    code = "LN000"

    def __init__(self, message: str, *, metadata: Optional[dict[str, Any]] = None):
        super().__init__(code=type(self).code, message=message, metadata=metadata)


# ============================================================================
# COMPOSITION Faults
# ============================================================================

class ArgumentError(LineageFault, TypeError):
    """Malformed factory call or missing required settings."""

    code = "LN100"


class InvalidBlueprintError(LineageFault, TypeError):
    """Blueprint declaration is malformed."""

    code = "LN110"

    def __init__(self, blueprint: str, reason: str):
        super().__init__(
            f"Invalid blueprint '{blueprint}': {reason}",
            metadata={"blueprint": blueprint, "reason": reason},
        )
        self.blueprint = blueprint
        self.reason = reason


class BlueprintCycleError(LineageFault, RecursionError):
    """A blueprint delegates to itself, directly or through its ancestors."""

    code = "LN120"

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(
            f"Delegation cycle detected: {' -> '.join(self.cycle)}",
            metadata={"cycle": self.cycle},
        )


class ChainDepthError(LineageFault, RecursionError):
    """Delegation chain is deeper than the configured limit."""

    code = "LN121"

    def __init__(self, chain: Sequence[str], max_depth: int):
        self.chain = list(chain)
        self.max_depth = max_depth
        super().__init__(
            f"Delegation chain exceeds max depth {max_depth} at '{self.chain[-1]}'",
            metadata={"chain": self.chain, "max_depth": max_depth},
        )


# ============================================================================
# CONTRACT Faults
# ============================================================================

class ContractFault(LineageFault):
    """Base class for contract-domain faults."""

    domain = FaultDomain.CONTRACT
    code = "LN2XX"


class InvalidHintError(ContractFault, TypeError):
    """Type hint is not a primitive-kind tag or a blueprint reference."""

    code = "LN200"

    def __init__(self, hint: Any):
        self.hint = hint
        super().__init__(
            f"Invalid type hint {hint!r}. A type hint is one of 'string', 'number', "
            f"'boolean', 'function', 'array' or a blueprint",
            metadata={"hint": hint},
        )


class ContractViolationError(ContractFault):
    """An instance or a call breaks a declared interface or contract."""

    code = "LN300"
    kind = "violation"

    def __init__(self, message: str, *, method: str, metadata: Optional[dict[str, Any]] = None):
        self.method = method
        super().__init__(message, metadata={"method": method, "kind": self.kind, **(metadata or {})})


class MissingMethodError(ContractViolationError, AttributeError):
    """Declared interface/contract method is absent on the instance."""

    code = "LN301"
    kind = "missing-method"
    severity = Severity.FATAL

    def __init__(self, method: str, *, source: str = "contract"):
        self.source = source
        what = "Implemented interface" if source == "interface" else "Contract"
        super().__init__(
            f"{what} requires '{method}' method",
            method=method,
            metadata={"source": source},
        )


class TypeMismatchError(ContractViolationError, TypeError):
    """Argument fails the hint declared for its position."""

    code = "LN310"
    kind = "type-mismatch"

    def __init__(
        self,
        method: str,
        position: int,
        expected: str,
        requirement: str,
        *,
        source: str = "contract",
    ):
        self.position = position
        self.expected = expected
        self.requirement = requirement
        self.source = source
        if requirement == "kind":
            detail = f"is required to be a '{expected}'"
        else:
            what = "implemented interface" if source == "interface" else "contract"
            detail = f"violates the {what} (expected an instance of {expected})"
        super().__init__(
            f"Argument #{position} of method '{method}' {detail}",
            method=method,
            metadata={
                "position": position,
                "expected": expected,
                "requirement": requirement,
                "source": source,
            },
        )


class ReturnTypeMismatchError(TypeMismatchError):
    """Return value fails the declared exit hint."""

    code = "LN311"
    kind = "return-type-mismatch"

    def __init__(self, method: str, expected: str, requirement: str):
        self.position = 0
        self.expected = expected
        self.requirement = requirement
        self.source = "contract"
        ContractViolationError.__init__(
            self,
            f"Method '{method}' return value is required to be a {expected}",
            method=method,
            metadata={"expected": expected, "requirement": requirement},
        )


class RangeViolationError(ContractViolationError, ValueError):
    """Argument fails a custom validator."""

    code = "LN320"
    kind = "range-violation"

    def __init__(self, method: str, position: int):
        self.position = position
        super().__init__(
            f"Argument #{position} of method '{method}' is outside of its valid range",
            method=method,
            metadata={"position": position},
        )


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigError(LineageFault, ValueError):
    """Raised when configuration validation fails."""

    domain = FaultDomain.CONFIG
    code = "LN900"
