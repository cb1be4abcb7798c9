"""
Hook pipeline - ordered post-construction extension points.

Every instance created by a factory is passed through the hooks of its
registry in registration order. A hook declares what it acts on (reserved
declaration keys, member names, a marker blueprint in the lineage); the
registry only invokes it on instances that satisfy that requirement.

The registry is append-only: no de-duplication, no priorities, no removal.
Hooks are expected to be registered at import time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Tuple

from .diagnostics import CompositionEventType
from .instance import Instance, has_member, is_instance_of, name_of

if TYPE_CHECKING:
    from .diagnostics import Diagnostics
    from .factory import CreateCall

logger = logging.getLogger("lineage.hooks")


HookCallback = Callable[[Instance, "CreateCall"], None]


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class Hook:
    """
    Hook registration.

    Attributes:
        name: Hook name for diagnostics
        callback: ``callback(instance, call)``
        declares: Reserved declaration keys the instance must declare
        members: Member names the instance must expose
        lineage: Marker blueprint the instance's chain must include
    """

    name: str
    callback: HookCallback
    declares: Tuple[str, ...] = ()
    members: Tuple[str, ...] = ()
    lineage: Any = None

    def applies_to(self, instance: Instance) -> bool:
        declaration = instance.__declaration__
        for key in self.declares:
            if declaration is None or not declaration.declares(key):
                return False
        for member in self.members:
            if not has_member(instance, member):
                return False
        if self.lineage is not None and not is_instance_of(instance, self.lineage):
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.declares:
            parts.append("declares=" + ",".join(self.declares))
        if self.members:
            parts.append("members=" + ",".join(self.members))
        if self.lineage is not None:
            parts.append(f"lineage={name_of(self.lineage)}")
        return " ".join(parts) or "all instances"


class HookRegistry:
    """
    Ordered, append-only list of hooks.
    """

    __slots__ = ("_hooks", "diagnostics")

    def __init__(self, diagnostics: Optional["Diagnostics"] = None):
        self._hooks: List[Hook] = []
        self.diagnostics = diagnostics

    def register(
        self,
        callback: HookCallback,
        *,
        name: Optional[str] = None,
        declares: Sequence[str] | str | None = None,
        members: Sequence[str] | str | None = None,
        lineage: Any = None,
    ) -> Hook:
        """
        Append a hook.

        Args:
            callback: ``callback(instance, call)``, return value ignored
            name: Hook name for diagnostics (defaults to the callback's name)
            declares: Reserved key(s) the instance must declare
            members: Member name(s) the instance must expose
            lineage: Marker blueprint required in the instance's chain

        Returns:
            The registered :class:`Hook`
        """
        if not callable(callback):
            raise TypeError(f"Hook callback must be callable, got {type(callback).__name__}")
        hook = Hook(
            name=name or getattr(callback, "__qualname__", repr(callback)),
            callback=callback,
            declares=_as_tuple(declares),
            members=_as_tuple(members),
            lineage=lineage,
        )
        self._hooks.append(hook)
        logger.debug("Registered hook %s at position %d (%s)", hook.name, len(self._hooks) - 1, hook.describe())
        if self.diagnostics is not None and self.diagnostics.enabled:
            self.diagnostics.emit(
                CompositionEventType.HOOK_REGISTERED,
                hook=hook.name,
                metadata={"position": len(self._hooks) - 1},
            )
        return hook

    def dispatch(
        self,
        instance: Instance,
        call: "CreateCall",
        diagnostics: Optional["Diagnostics"] = None,
    ) -> None:
        """Invoke every applicable hook, in registration order."""
        for hook in tuple(self._hooks):
            if not hook.applies_to(instance):
                continue
            hook.callback(instance, call)
            if diagnostics is not None and diagnostics.enabled:
                diagnostics.emit(
                    CompositionEventType.HOOK_DISPATCH,
                    blueprint=name_of(call.blueprint),
                    hook=hook.name,
                )

    @property
    def hooks(self) -> Tuple[Hook, ...]:
        return tuple(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def __iter__(self):
        return iter(tuple(self._hooks))


# ============================================================================
# Process-wide registry
# ============================================================================

_default_registry: Optional[HookRegistry] = None


def get_default_registry() -> HookRegistry:
    """
    Process-wide registry, created on first use with the built-in hooks
    (mixins, interface, contract) registered in that order.
    """
    global _default_registry
    if _default_registry is None:
        from .plugins import register_builtin_hooks

        registry = HookRegistry()
        register_builtin_hooks(registry)
        _default_registry = registry
    return _default_registry


def register_hook(
    callback: Optional[HookCallback] = None,
    *,
    name: Optional[str] = None,
    declares: Sequence[str] | str | None = None,
    members: Sequence[str] | str | None = None,
    lineage: Any = None,
) -> Any:
    """
    Register a hook into the process-wide registry.

    Usable directly or as a decorator:

        @register_hook(lineage=WidgetAbstract)
        def bind(instance, call): ...
    """
    def decorator(fn: HookCallback) -> HookCallback:
        get_default_registry().register(
            fn, name=name, declares=declares, members=members, lineage=lineage
        )
        return fn

    if callback is None:
        return decorator
    return decorator(callback)
