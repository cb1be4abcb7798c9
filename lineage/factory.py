"""
Factory - controlled instantiation.

    create(blueprint)
    create(blueprint, [args...])
    create(blueprint, {extra props})
    create(blueprint, [args...], {extra props})

The factory builds the instance through the delegation resolver, then
passes it, together with a record of the original call, through the hook
pipeline in registration order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .config import LineageConfig, configure_logging, load_config
from .diagnostics import CompositionEventType, Diagnostics
from .faults import ArgumentError
from .hooks import HookRegistry, get_default_registry
from .instance import Instance, name_of
from .resolver import DelegationResolver

logger = logging.getLogger("lineage.factory")


@dataclass(frozen=True)
class CreateCall:
    """
    Record of one factory call, handed to every hook.

    Attributes:
        blueprint: Blueprint passed to the factory
        args: Constructor arguments
        props: Extra properties mapping (empty when none were given)
        raw: Positional arguments exactly as supplied
        config: Configuration of the factory handling the call
    """

    blueprint: Any
    args: Tuple[Any, ...] = ()
    props: Dict[str, Any] = field(default_factory=dict)
    raw: Tuple[Any, ...] = ()
    config: LineageConfig = field(default_factory=LineageConfig)

    @property
    def has_props(self) -> bool:
        """True if the caller supplied an extra-properties mapping."""
        return any(isinstance(arg, Mapping) for arg in self.raw[1:])


def _is_arguments(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _trim(raw: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """Drop trailing ``None`` arguments (omitted optionals)."""
    end = len(raw)
    while end and raw[end - 1] is None:
        end -= 1
    return raw[:end]


def parse_call(raw: Tuple[Any, ...], config: LineageConfig) -> CreateCall:
    """
    Disambiguate factory arguments.

    Raises:
        ArgumentError: no blueprint, a blueprint that is neither callable
            nor a mapping, or a malformed second/third argument
    """
    if not raw:
        raise ArgumentError("First argument (blueprint) required")

    blueprint = raw[0]
    if not callable(blueprint) and not isinstance(blueprint, Mapping):
        raise ArgumentError(
            f"Invalid type argument '{type(blueprint).__name__}'. "
            f"Here expected either a callable or a mapping blueprint"
        )

    args: Tuple[Any, ...] = ()
    props: Dict[str, Any] = {}

    if len(raw) >= 2:
        second = raw[1]
        if second is None:
            pass
        elif _is_arguments(second):
            args = tuple(second)
        elif isinstance(second, Mapping):
            props = dict(second)
        else:
            raise ArgumentError(
                f"Invalid type argument '{type(second).__name__}'. "
                f"Here expected either an arguments sequence or a properties mapping"
            )

    if len(raw) == 3:
        third = raw[2]
        if isinstance(raw[1], Mapping):
            raise ArgumentError(
                "A properties mapping may only follow an arguments sequence"
            )
        if not isinstance(third, Mapping):
            raise ArgumentError(
                f"Invalid type argument '{type(third).__name__}'. Here expected a properties mapping"
            )
        props = dict(third)

    return CreateCall(blueprint=blueprint, args=args, props=props, raw=raw, config=config)


class Factory:
    """
    Instance factory bound to a hook registry, a configuration and
    diagnostics.

    Example:
        ```python
        factory = Factory(registry=HookRegistry())
        widget = factory.create(Widget, ["title"], {"color": "red"})
        ```
    """

    __slots__ = ("registry", "config", "diagnostics", "_resolver")

    def __init__(
        self,
        registry: Optional[HookRegistry] = None,
        config: Optional[LineageConfig] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.registry = registry if registry is not None else get_default_registry()
        self.config = config or LineageConfig()
        self.diagnostics = diagnostics or Diagnostics()
        self._resolver = DelegationResolver(
            max_depth=self.config.max_chain_depth,
            on_build=self._on_build,
        )

    def _on_build(self, blueprint: Any, instance: Instance, trace: list) -> None:
        if self.diagnostics.enabled:
            self.diagnostics.emit(
                CompositionEventType.BUILD,
                blueprint=name_of(blueprint),
                metadata={"trace": trace},
            )

    def create(self, blueprint: Any = None, args_or_props: Any = None, props: Any = None) -> Instance:
        """
        Create an instance of ``blueprint``.

        Args:
            blueprint: Callable or mapping blueprint
            args_or_props: Constructor arguments (list/tuple) or an extra
                properties mapping
            props: Extra properties mapping, after an arguments sequence

        Raises:
            ArgumentError: malformed call
            InvalidBlueprintError / InvalidHintError: malformed declaration
            ContractViolationError: a hook rejected the instance
        """
        raw = _trim((blueprint, args_or_props, props))
        call = parse_call(raw, self.config)

        started = time.perf_counter()
        instance = self._resolver.build(call.blueprint, call.args, call.props)
        self.registry.dispatch(instance, call, self.diagnostics)

        if self.diagnostics.enabled:
            self.diagnostics.emit(
                CompositionEventType.CREATE_COMPLETE,
                blueprint=name_of(call.blueprint),
                duration=time.perf_counter() - started,
            )
        logger.debug("Created %s with %d hook(s) registered", name_of(call.blueprint), len(self.registry))
        return instance


# ============================================================================
# Process-wide factory
# ============================================================================

_default_factory: Optional[Factory] = None


def get_default_factory() -> Factory:
    """
    Process-wide factory: default registry, config from the environment.

    The config's ``log_level`` is applied to the ``lineage`` logger when
    the factory is first created.
    """
    global _default_factory
    if _default_factory is None:
        config = load_config()
        configure_logging(config)
        _default_factory = Factory(config=config)
    return _default_factory


def create(blueprint: Any = None, args_or_props: Any = None, props: Any = None) -> Instance:
    """Create an instance through the process-wide factory."""
    return get_default_factory().create(blueprint, args_or_props, props)
