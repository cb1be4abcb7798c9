"""
Composer - shallow copy of own members from one object onto another.

The only primitive used both for extra-property injection during
construction and for mixin application. Precedence is decided purely by
call order: the last writer wins.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Iterable, Tuple

from .instance import Instance


def own_items(source: Any) -> Iterable[Tuple[str, Any]]:
    """
    Own, enumerable ``(key, value)`` pairs of ``source`` in insertion order.

    Mappings yield every key, lineage instances yield their own properties,
    other objects (trait classes, namespaces) yield their public non-dunder
    attributes. ``None`` yields nothing.
    """
    if source is None:
        return ()
    if isinstance(source, Mapping):
        return list(source.items())
    if isinstance(source, Instance):
        return list(vars(source).items())
    try:
        namespace = vars(source)
    except TypeError:
        return ()
    return [
        (key, value)
        for key, value in namespace.items()
        if not (key.startswith("__") and key.endswith("__"))
    ]


def compose(destination: Any, source: Any) -> Any:
    """
    Copy every own key of ``source`` onto ``destination``.

    Existing keys are overwritten. Returns ``destination`` so calls chain:

        compose(compose({}, {"x": 1}), {"x": 2})  # {"x": 2}
    """
    items = own_items(source)
    if isinstance(destination, MutableMapping):
        for key, value in items:
            destination[key] = value
    else:
        for key, value in items:
            setattr(destination, key, value)
    return destination
