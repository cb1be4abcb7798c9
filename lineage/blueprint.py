"""
Blueprints - member descriptors and their reserved-key declarations.

A blueprint is a callable returning a member mapping when invoked with the
constructor arguments, or a plain member mapping. Five reserved keys are
split out of the member mapping into an explicit :class:`Declaration`:

    parent            blueprint to delegate to (single parent)
    constructor_hook  callable(instance, *args) run on the assembled instance
    implements        {method: [hint, ...]}
    contract          {method: [hint, ...] | {on_entry, validators, on_exit}}
    mixins            [trait, ...]

Example:
    ```python
    @blueprint
    def Account(owner):
        return {
            "parent": Entity,
            "constructor_hook": lambda self, owner: setattr(self, "history", []),
            "contract": {"deposit": {"on_entry": ["number"], "on_exit": "number"}},
            "deposit": lambda self, amount: ...,
        }
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .faults import InvalidBlueprintError
from .hints import validate_hint
from .instance import name_of

logger = logging.getLogger("lineage.blueprint")


RESERVED_KEYS = ("parent", "constructor_hook", "implements", "contract", "mixins")

_CONTRACT_KEYS = frozenset(("on_entry", "validators", "on_exit"))


# ============================================================================
# Declaration records
# ============================================================================

@dataclass(frozen=True, slots=True)
class MethodContract:
    """
    Per-method contract.

    ``on_entry`` and ``validators`` are positional; ``None`` at a position
    skips it. ``on_exit`` of ``None`` means the return value is unchecked.
    """

    on_entry: Tuple[Any, ...] = ()
    validators: Tuple[Optional[Callable[[Any], Any]], ...] = ()
    on_exit: Any = None


@dataclass(frozen=True, slots=True)
class Declaration:
    """Reserved-key declaration of one blueprint level, or a merged chain."""

    parent: Any = None
    constructor_hook: Optional[Callable[..., Any]] = None
    implements: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)
    contract: Dict[str, MethodContract] = field(default_factory=dict)
    mixins: Any = None

    def declares(self, key: str) -> bool:
        """True if the reserved ``key`` carries a value at this level."""
        if key not in RESERVED_KEYS:
            return False
        value = getattr(self, key)
        if isinstance(value, (dict, tuple)):
            return bool(value)
        return value is not None

    def merged_over(self, base: Optional["Declaration"]) -> "Declaration":
        """
        Merge this level over an ancestor's merged declaration.

        For each reserved key the most-derived declaring level wins, as a
        property lookup through the chain would.
        """
        if base is None:
            return self
        values = {}
        for f in fields(self):
            values[f.name] = getattr(self if self.declares(f.name) else base, f.name)
        return Declaration(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parent": name_of(self.parent) if self.parent is not None else None,
            "constructor_hook": self.constructor_hook is not None,
            "implements": {m: len(h) for m, h in self.implements.items()},
            "contract": sorted(self.contract),
            "mixins": len(self.mixins) if isinstance(self.mixins, tuple) else None,
        }


# ============================================================================
# Parsing
# ============================================================================

def _is_blueprint(value: Any) -> bool:
    return callable(value) or isinstance(value, Mapping)


def _hint_sequence(owner: str, method: str, value: Any) -> Tuple[Any, ...]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise InvalidBlueprintError(
            owner, f"hints for '{method}' must be a sequence, got {type(value).__name__}"
        )
    return tuple(validate_hint(h) if h is not None else None for h in value)


def parse_method_contract(owner: str, method: str, value: Any) -> MethodContract:
    """Normalize one ``contract`` entry into a :class:`MethodContract`."""
    if isinstance(value, MethodContract):
        return value
    if not isinstance(value, Mapping):
        # Interface form: "method": ["string", Dep]
        return MethodContract(on_entry=_hint_sequence(owner, method, value))

    unknown = set(value) - _CONTRACT_KEYS
    if unknown:
        raise InvalidBlueprintError(
            owner, f"contract for '{method}' has unknown keys {sorted(unknown)}"
        )

    on_entry = _hint_sequence(owner, method, value.get("on_entry") or ())

    validators = value.get("validators") or ()
    if isinstance(validators, str) or not isinstance(validators, Sequence):
        raise InvalidBlueprintError(owner, f"validators for '{method}' must be a sequence")
    for validator in validators:
        if validator is not None and not callable(validator):
            raise InvalidBlueprintError(
                owner, f"validator for '{method}' is not callable: {validator!r}"
            )

    on_exit = value.get("on_exit")
    if on_exit is not None:
        validate_hint(on_exit)

    return MethodContract(on_entry=on_entry, validators=tuple(validators), on_exit=on_exit)


def _method_map(owner: str, key: str, value: Any) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidBlueprintError(owner, f"'{key}' must be a mapping of method names")
    for method in value:
        if not isinstance(method, str):
            raise InvalidBlueprintError(owner, f"'{key}' method names must be strings, got {method!r}")
    return value


def parse_declaration(owner: str, reserved: Mapping[str, Any]) -> Declaration:
    """Validate reserved keys and build a :class:`Declaration`."""
    parent = reserved.get("parent")
    if parent is not None and not _is_blueprint(parent):
        raise InvalidBlueprintError(
            owner, f"'parent' must be a blueprint (callable or mapping), got {type(parent).__name__}"
        )

    constructor_hook = reserved.get("constructor_hook")
    if constructor_hook is not None and not callable(constructor_hook):
        raise InvalidBlueprintError(owner, "'constructor_hook' must be callable")

    implements: Dict[str, Tuple[Any, ...]] = {}
    if reserved.get("implements") is not None:
        for method, hints in _method_map(owner, "implements", reserved["implements"]).items():
            implements[method] = _hint_sequence(owner, method, hints)

    contract: Dict[str, MethodContract] = {}
    if reserved.get("contract") is not None:
        for method, entry in _method_map(owner, "contract", reserved["contract"]).items():
            contract[method] = parse_method_contract(owner, method, entry)

    mixins = reserved.get("mixins")
    if isinstance(mixins, list):
        mixins = tuple(mixins)
    elif mixins is not None and not isinstance(mixins, tuple):
        logger.debug("Blueprint %s: ignoring non-sequence mixins %r", owner, type(mixins).__name__)

    return Declaration(
        parent=parent,
        constructor_hook=constructor_hook,
        implements=implements,
        contract=contract,
        mixins=mixins,
    )


def split_members(owner: str, members: Mapping[str, Any]) -> Tuple[Dict[str, Any], Declaration]:
    """Separate plain members from reserved keys."""
    plain: Dict[str, Any] = {}
    reserved: Dict[str, Any] = {}
    for key, value in members.items():
        if key in RESERVED_KEYS:
            reserved[key] = value
        else:
            plain[key] = value
    return plain, parse_declaration(owner, reserved)


# ============================================================================
# Blueprint wrapper
# ============================================================================

class Blueprint:
    """
    Named, validated wrapper around a callable or mapping blueprint.

    A ``Blueprint`` is itself a callable blueprint: calling it with the
    constructor arguments returns a fresh member dict. Lineage membership
    is keyed on the wrapped source, so the wrapper and the raw function are
    interchangeable as parents and hints.
    """

    def __init__(self, source: Any, *, name: Optional[str] = None):
        if isinstance(source, Blueprint):
            source = source.__lineage_source__
        if not _is_blueprint(source):
            raise InvalidBlueprintError(
                name or repr(source), "a blueprint must be a callable or a mapping"
            )
        self.__lineage_source__ = source
        self.__lineage_name__ = name or name_of(source)
        self.__doc__ = getattr(source, "__doc__", None) if callable(source) else None

        # Mapping blueprints are fully known now; validate eagerly
        if isinstance(source, Mapping):
            reserved = {k: v for k, v in source.items() if k in RESERVED_KEYS}
            parse_declaration(self.__lineage_name__, reserved)

    @property
    def name(self) -> str:
        return self.__lineage_name__

    @property
    def source(self) -> Any:
        return self.__lineage_source__

    def __call__(self, *args: Any) -> Dict[str, Any]:
        source = self.__lineage_source__
        if isinstance(source, Mapping):
            return dict(source)
        members = source(*args)
        if not isinstance(members, Mapping):
            raise InvalidBlueprintError(
                self.__lineage_name__,
                f"blueprint must return a mapping of members, got {type(members).__name__}",
            )
        return dict(members)

    def new(self, *args: Any, **props: Any) -> Any:
        """Create an instance through the default factory."""
        from .factory import get_default_factory

        return get_default_factory().create(self, list(args), props)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Blueprint):
            return self.__lineage_source__ is other.__lineage_source__
        return self.__lineage_source__ is other

    def __hash__(self) -> int:
        return id(self.__lineage_source__)

    def __repr__(self) -> str:
        return f"Blueprint({self.__lineage_name__!r})"


def blueprint(source: Any = None, *, name: Optional[str] = None) -> Any:
    """
    Wrap a callable or mapping as a :class:`Blueprint`.

    Usable as ``@blueprint``, ``@blueprint(name="...")`` or
    ``blueprint({...}, name="...")``.
    """
    if source is None:
        return lambda fn: Blueprint(fn, name=name)
    return Blueprint(source, name=name)
