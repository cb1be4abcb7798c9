"""
Delegation resolver - builds linked instances from blueprint chains.

The chain is resolved bottom-up: the root ancestor is built first and
each descendant's members are applied on top, so one member table is
materialized per instance instead of relying on live lookup through
ancestors. Visited blueprint identities are tracked on a resolution stack
so that a cyclic ``parent`` chain fails fast.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from .blueprint import Declaration, split_members
from .compose import compose
from .faults import BlueprintCycleError, ChainDepthError, InvalidBlueprintError
from .instance import Instance, name_of, source_of

logger = logging.getLogger("lineage.resolver")


DEFAULT_MAX_DEPTH = 128


class ResolveCtx:
    """
    Context for one resolution.

    Tracks the blueprints currently being resolved for cycle detection
    and diagnostics.
    """

    __slots__ = ("stack", "names", "max_depth")

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.stack: List[Any] = []
        self.names: List[str] = []
        self.max_depth = max_depth

    def push(self, blueprint: Any) -> None:
        """Push blueprint onto the resolution stack, failing on cycles."""
        identity = source_of(blueprint)
        name = name_of(blueprint)
        if self.in_cycle(identity):
            start = next(i for i, b in enumerate(self.stack) if b is identity)
            raise BlueprintCycleError(self.names[start:] + [name])
        if len(self.stack) >= self.max_depth:
            raise ChainDepthError(self.names + [name], self.max_depth)
        self.stack.append(identity)
        self.names.append(name)

    def pop(self) -> None:
        self.stack.pop()
        self.names.pop()

    def in_cycle(self, identity: Any) -> bool:
        return any(b is identity for b in self.stack)

    def get_trace(self) -> List[str]:
        return self.names.copy()


def resolve_members(blueprint: Any, args: Sequence[Any]) -> Dict[str, Any]:
    """Invoke a callable blueprint, or copy a mapping blueprint."""
    if callable(blueprint):
        members = blueprint(*args)
        if not isinstance(members, Mapping):
            raise InvalidBlueprintError(
                name_of(blueprint),
                f"blueprint must return a mapping of members, got {type(members).__name__}",
            )
        return dict(members)
    if isinstance(blueprint, Mapping):
        return dict(blueprint)
    raise InvalidBlueprintError(
        name_of(blueprint), f"expected a callable or a mapping, got {type(blueprint).__name__}"
    )


class DelegationResolver:
    """
    Builds fully linked instances.

    Hooks are not this class's concern; the factory dispatches them once
    the most-derived instance exists.
    """

    __slots__ = ("max_depth", "_on_build")

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, on_build: Optional[Any] = None):
        self.max_depth = max_depth
        self._on_build = on_build

    def build(
        self,
        blueprint: Any,
        args: Sequence[Any] = (),
        extra_props: Optional[Mapping[str, Any]] = None,
    ) -> Instance:
        """
        Build an instance of ``blueprint``.

        Args:
            blueprint: Callable or mapping blueprint
            args: Constructor arguments, passed to every level of the chain
            extra_props: Properties composed over the blueprint's own members

        Raises:
            InvalidBlueprintError: malformed blueprint or declaration
            BlueprintCycleError: ``parent`` chain loops back on itself
            ChainDepthError: chain deeper than ``max_depth``
        """
        ctx = ResolveCtx(max_depth=self.max_depth)
        return self._build(ctx, blueprint, tuple(args), extra_props)

    def _build(
        self,
        ctx: ResolveCtx,
        blueprint: Any,
        args: tuple,
        extra_props: Optional[Mapping[str, Any]],
    ) -> Instance:
        ctx.push(blueprint)
        try:
            members = resolve_members(blueprint, args)
            compose(members, extra_props)
            plain, declaration = split_members(name_of(blueprint), members)

            seed: Dict[str, Any] = {}
            lineage = (source_of(blueprint),)
            merged: Declaration = declaration

            if declaration.parent is not None:
                parent = self._build(ctx, declaration.parent, args, None)
                # Parent's chain, then what its constructor hook set on it
                compose(seed, parent.__members__)
                compose(seed, parent)
                lineage += parent.__lineage__
                merged = declaration.merged_over(parent.__declaration__)

            instance = Instance(compose(seed, plain), lineage, merged)

            if declaration.constructor_hook is not None:
                declaration.constructor_hook(instance, *args)

            logger.debug(
                "Built %s (depth=%d, members=%d)",
                name_of(blueprint), len(lineage), len(instance.__members__),
            )
            if self._on_build is not None:
                self._on_build(blueprint, instance, ctx.get_trace())
            return instance
        finally:
            ctx.pop()
