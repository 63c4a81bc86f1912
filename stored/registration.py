from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .binder import ConnectedComponent
from .logger import get_logger

if TYPE_CHECKING:
    from .registry import Registry

_logger = get_logger("registration")


def register(
    registry: Registry,
    component_defs: Mapping[str, Any],
    actions: Mapping[str, Callable[..., Any]] | None = None,
    models: Mapping[str, Any] | None = None,
) -> dict[str, ConnectedComponent]:
    """Wrap every component and make ``actions``/``models`` available to them.

    Models whose name is also an action are skipped (the action wins). Every
    wrapped component gets every action, and the action set replaces whatever
    a previous call registered.
    """
    actions = dict(actions or {})
    models = models or {}

    registry.merge_models(models, actions)

    items: dict[str, ConnectedComponent] = {}
    for name, component in component_defs.items():
        items[name] = ConnectedComponent(registry, component, actions, name=name)

    registry.set_actions(actions)
    _logger.debug(
        "registered %d component(s), %d action(s), %d model(s)",
        len(items),
        len(actions),
        len(registry.models),
    )
    return items
