"""
Widget lifecycle binding.

Importing this module registers two hooks into the process-wide registry:

- instances whose lineage includes ``WidgetAbstract`` get their
  ``bounding_box`` (required) and every selector in ``html_parser``
  resolved into ``instance.node``;
- instances whose lineage includes ``BaseAbstract`` have ``init``,
  ``render_ui``, ``bind_ui`` and ``sync_ui`` invoked, in that order,
  skipping the ones they do not define.

Example:
    ```python
    @blueprint
    def Toolbar(settings):
        return {
            "parent": WidgetAbstract,
            "html_parser": {"buttons": "ul.buttons"},
            "render_ui": lambda self: self.node["buttons"].append(...),
        }

    toolbar = create(Toolbar, {"bounding_box": document.select_one("#toolbar")})
    ```

Element lookup goes through a query-selector capability
``(selector, context=None) -> element``; install one with
:func:`set_query_selector`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from .blueprint import Blueprint
from .faults import ArgumentError
from .hooks import HookRegistry, get_default_registry
from .instance import Instance, has_member

logger = logging.getLogger("lineage.widget")


LIFECYCLE_METHODS = ("init", "render_ui", "bind_ui", "sync_ui")


QuerySelector = Callable[[Any, Optional[Any]], Any]


def default_query_selector(selector: Any, context: Optional[Any] = None) -> Any:
    """
    Resolve ``selector`` against ``context``.

    Non-string selectors are taken to be elements already. String
    selectors need a context exposing ``select_one`` (a BeautifulSoup
    document or tag).
    """
    if not isinstance(selector, str):
        return selector
    select_one = getattr(context, "select_one", None)
    if select_one is None:
        raise ArgumentError(
            f"Cannot resolve selector '{selector}' without a query selector; "
            f"pass an element or install one with set_query_selector()"
        )
    return select_one(selector)


_query_selector: QuerySelector = default_query_selector


def set_query_selector(fn: Optional[QuerySelector]) -> None:
    """Install the query-selector capability (``None`` restores the default)."""
    global _query_selector
    _query_selector = fn or default_query_selector


def get_query_selector() -> QuerySelector:
    return _query_selector


# ============================================================================
# Marker blueprints
# ============================================================================

def _base_abstract(*args: Any) -> dict:
    return {}


def _widget_abstract(*args: Any) -> dict:
    return {"parent": BaseAbstract}


BaseAbstract = Blueprint(_base_abstract, name="BaseAbstract")
"""Foundation blueprint: its descendants get lifecycle methods invoked."""

WidgetAbstract = Blueprint(_widget_abstract, name="WidgetAbstract")
"""Widget foundation: descendants are bound to a bounding box."""


# ============================================================================
# Hooks
# ============================================================================

def bind_nodes(instance: Instance, call: Any) -> None:
    if not has_member(instance, "bounding_box"):
        raise ArgumentError(
            "Widget derivative is missing required settings: "
            "expected a bounding_box property"
        )
    query = get_query_selector()
    bounding_box = query(instance.bounding_box, None)
    node = {"bounding_box": bounding_box}

    parser = instance.html_parser if has_member(instance, "html_parser") else None
    if isinstance(parser, Mapping):
        for name, selector in parser.items():
            node[name] = query(selector, bounding_box)

    instance.node = node
    logger.debug("Bound %d node(s) on %r", len(node), instance)


def run_lifecycle(instance: Instance, call: Any) -> None:
    for method in LIFECYCLE_METHODS:
        if has_member(instance, method):
            getattr(instance, method)()


def register_widget_hooks(registry: HookRegistry) -> None:
    """Register the node-binding and lifecycle hooks into ``registry``."""
    registry.register(bind_nodes, name="widget.bind_nodes", lineage=WidgetAbstract)
    registry.register(run_lifecycle, name="widget.lifecycle", lineage=BaseAbstract)


register_widget_hooks(get_default_registry())
