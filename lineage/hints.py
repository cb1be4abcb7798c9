"""
Hint matcher - runtime checks for declared argument/return hints.

A hint is either a primitive-kind tag or a blueprint reference:

    "string"    str
    "number"    int or float (bool is not a number)
    "boolean"   bool
    "function"  any callable
    "array"     list or tuple
    Blueprint   the value's delegation chain includes that blueprint

A Python class may also be used as a hint; values that are not lineage
instances are then matched with ``isinstance``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict

from .faults import InvalidHintError
from .instance import Instance, is_instance_of, name_of


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


PRIMITIVE_KINDS: Dict[str, Callable[[Any], bool]] = {
    "string": _is_string,
    "number": _is_number,
    "boolean": _is_boolean,
    "function": callable,
    "array": _is_array,
}


def is_blueprint_ref(hint: Any) -> bool:
    """True for anything that can be used as a blueprint reference."""
    return callable(hint) or isinstance(hint, Mapping)


def validate_hint(hint: Any) -> Any:
    """Raise :class:`InvalidHintError` unless ``hint`` is well-formed."""
    if isinstance(hint, str):
        if hint not in PRIMITIVE_KINDS:
            raise InvalidHintError(hint)
    elif not is_blueprint_ref(hint):
        raise InvalidHintError(hint)
    return hint


def hint_requirement(hint: Any) -> str:
    """``"kind"`` for primitive-kind tags, ``"lineage"`` for blueprint refs."""
    return "kind" if isinstance(hint, str) else "lineage"


def describe_hint(hint: Any) -> str:
    if isinstance(hint, str):
        return hint
    return name_of(hint)


def matches(value: Any, hint: Any) -> bool:
    """
    Decide whether ``value`` satisfies ``hint``.

    Raises:
        InvalidHintError: ``hint`` is an unknown kind tag or not a
            blueprint reference.
    """
    if isinstance(hint, str):
        check = PRIMITIVE_KINDS.get(hint)
        if check is None:
            raise InvalidHintError(hint)
        return bool(check(value))

    if not is_blueprint_ref(hint):
        raise InvalidHintError(hint)

    if isinstance(value, Instance):
        return is_instance_of(value, hint)
    if isinstance(hint, type):
        return isinstance(value, hint)
    return False
