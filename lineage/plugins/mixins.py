"""
Mixin hook - copies trait members onto the instance.

Traits are applied in declaration order after the instance exists, so
later traits override earlier ones and every trait overrides same-named
delegation-chain members. Trait keys whose value is ``None`` are skipped.
"""

from __future__ import annotations

import logging
from typing import Any

from ..compose import compose, own_items
from ..instance import Instance

logger = logging.getLogger("lineage.plugins.mixins")


def apply_mixins(instance: Instance, call: Any) -> None:
    """Hook: compose each declared trait onto the instance."""
    if not call.config.apply_mixins:
        return
    traits = instance.__declaration__.mixins
    if not isinstance(traits, tuple):
        logger.debug("Skipping non-sequence mixins on %r", instance)
        return
    for trait in traits:
        compose(instance, {key: value for key, value in own_items(trait) if value is not None})
