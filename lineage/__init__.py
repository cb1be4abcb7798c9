"""
Lineage - prototype-style object composition for Python

Complete integration of:
- Blueprints: member descriptors with explicit reserved-key declarations
- Resolver: single-parent delegation chains, cycle and depth checked
- Factory: one entry point, four call shapes
- Hooks: ordered post-construction pipeline
- Plugins: mixins, interfaces, design-by-contract
- Faults: structured errors with stable codes
- Config: layered settings from files, .env and the environment
"""

__version__ = "0.1.0"

# ============================================================================
# Core
# ============================================================================

from .blueprint import Blueprint, Declaration, MethodContract, RESERVED_KEYS, blueprint
from .compose import compose
from .hints import PRIMITIVE_KINDS, matches
from .instance import (
    Instance,
    chain_members,
    declaration_of,
    has_member,
    has_own,
    is_instance_of,
    iter_members,
    lineage_of,
    own_members,
)
from .resolver import DelegationResolver, ResolveCtx

# ============================================================================
# Factory & Hooks
# ============================================================================

from .factory import CreateCall, Factory, create, get_default_factory
from .hooks import Hook, HookRegistry, get_default_registry, register_hook
from .plugins import ContractedMethod, register_builtin_hooks

# ============================================================================
# Config & Diagnostics
# ============================================================================

from .config import ConfigLoader, LineageConfig, configure_logging, load_config
from .diagnostics import (
    CompositionEvent,
    CompositionEventType,
    Diagnostics,
    LoggingDiagnosticListener,
    RecordingDiagnosticListener,
)

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    ArgumentError,
    BlueprintCycleError,
    ChainDepthError,
    ConfigError,
    ContractViolationError,
    Fault,
    FaultDomain,
    InvalidBlueprintError,
    InvalidHintError,
    LineageFault,
    MissingMethodError,
    RangeViolationError,
    ReturnTypeMismatchError,
    Severity,
    TypeMismatchError,
)

__all__ = [
    "__version__",
    # Core
    "Blueprint",
    "Declaration",
    "MethodContract",
    "RESERVED_KEYS",
    "blueprint",
    "compose",
    "PRIMITIVE_KINDS",
    "matches",
    "Instance",
    "chain_members",
    "declaration_of",
    "has_member",
    "has_own",
    "is_instance_of",
    "iter_members",
    "lineage_of",
    "own_members",
    "DelegationResolver",
    "ResolveCtx",
    # Factory & Hooks
    "CreateCall",
    "Factory",
    "create",
    "get_default_factory",
    "Hook",
    "HookRegistry",
    "get_default_registry",
    "register_hook",
    "ContractedMethod",
    "register_builtin_hooks",
    # Config & Diagnostics
    "ConfigLoader",
    "LineageConfig",
    "configure_logging",
    "load_config",
    "CompositionEvent",
    "CompositionEventType",
    "Diagnostics",
    "LoggingDiagnosticListener",
    "RecordingDiagnosticListener",
    # Faults
    "ArgumentError",
    "BlueprintCycleError",
    "ChainDepthError",
    "ConfigError",
    "ContractViolationError",
    "Fault",
    "FaultDomain",
    "InvalidBlueprintError",
    "InvalidHintError",
    "LineageFault",
    "MissingMethodError",
    "RangeViolationError",
    "ReturnTypeMismatchError",
    "Severity",
    "TypeMismatchError",
]
