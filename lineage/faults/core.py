"""
Base fault type shared by every error lineage raises.

A fault is an exception with a stable code, a domain naming the part of
the engine that failed (config, composition, contract) and a severity.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """How bad a fault is. Informational only: every fault is raised."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """Part of the engine a fault belongs to. Compares equal to its name."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Domains used by lineage
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.COMPOSITION = FaultDomain("composition", "Factory calls and delegation chains")
FaultDomain.CONTRACT = FaultDomain("contract", "Interfaces, contracts and type hints")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL},
    FaultDomain.COMPOSITION: {"severity": Severity.ERROR},
    FaultDomain.CONTRACT: {"severity": Severity.ERROR},
}


# ============================================================================
# Fault
# ============================================================================

class Fault(Exception):
    """
    Exception carrying ``code``, ``message``, ``domain``, ``severity`` and
    ``metadata`` (the offending method, position, blueprint, ...).

    ``code``, ``message`` and ``domain`` may be declared on a subclass
    instead of passed in; severity falls back to the class, then to the
    domain default.

    Example:
        ```python
        raise Fault(
            code="LN999",
            message="Something is off",
            domain=FaultDomain.COMPOSITION,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR})
        self.severity = severity or getattr(type(self), "severity", None) or defaults["severity"]
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view; metadata values that are not scalars are repr'd."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "metadata": {k: _safe(v) for k, v in self.metadata.items()},
        }


def _safe(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_safe(v) for v in value]
    return repr(value)
