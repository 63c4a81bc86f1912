from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Signal

from .logger import get_logger
from .projector import FieldMap, project

if TYPE_CHECKING:
    from .registry import Registry

_logger = get_logger("binder")


def field_map_of(component: Any) -> FieldMap | None:
    """Field map declared by a component definition (mapping key or attribute)."""
    if isinstance(component, Mapping):
        return component.get("field_map")
    return getattr(component, "field_map", None)


def render_of(component: Any) -> Callable[[dict[str, Any]], Any] | None:
    if isinstance(component, Mapping):
        return component.get("render")
    return component if callable(component) else None


def bind_actions(
    actions: Mapping[str, Callable[..., Any]],
    resolve_store: Callable[[], Any],
) -> dict[str, Callable[..., Any]]:
    """Wrap every action creator so calling it dispatches its result.

    ``resolve_store`` runs on each call, so actions bound before the store
    exists work once it is attached.
    """

    def _bound(name: str, creator: Callable[..., Any]) -> Callable[..., Any]:
        def dispatch_action(*args: Any, **kwargs: Any) -> Any:
            return resolve_store().dispatch(creator(*args, **kwargs))

        dispatch_action.__name__ = name
        dispatch_action.__wrapped__ = creator  # type: ignore[attr-defined]
        return dispatch_action

    return {name: _bound(name, creator) for name, creator in actions.items()}


class ConnectedComponent(QObject):
    """A component definition wired to a registry and its store.

    Props, lowest to highest precedence: registry models, bound actions,
    ``args``, projected state fields, own props.
    """

    propsChanged = Signal(object)

    def __init__(
        self,
        registry: Registry,
        component: Any,
        actions: Mapping[str, Callable[..., Any]] | None = None,
        name: str | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._registry = registry
        self._component = component
        self.name = name or getattr(component, "__name__", type(component).__name__)
        self.field_map = field_map_of(component)
        self._store: Any = None
        self._actions = bind_actions(actions or {}, self._dispatch_store)
        self._unsubscribers: list[Callable[[], None]] = []
        self._last_projected: dict[str, Any] | None = None

    @property
    def component(self) -> Any:
        return self._component

    @property
    def actions(self) -> dict[str, Callable[..., Any]]:
        return self._actions

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    def _current_store(self) -> Any:
        return self._store if self._store is not None else self._registry.store

    def _dispatch_store(self) -> Any:
        if self._store is not None:
            return self._store
        return self._registry.require_store()

    def projected(self) -> dict[str, Any]:
        store = self._current_store()
        if self.field_map is None or store is None:
            return {}
        settings = self._registry.settings
        return project(
            self.field_map,
            store.get_state(),
            warn_on_collision=settings.warn_on_field_collision,
            missing_level=settings.missing_slice_level,
        )

    def props(self, own_props: Mapping[str, Any] | None = None) -> dict[str, Any]:
        merged: dict[str, Any] = dict(self._registry.models)
        merged.update(self._actions)
        merged["args"] = self._registry.args
        merged.update(self.projected())
        if own_props:
            merged.update(own_props)
        return merged

    def render(self, own_props: Mapping[str, Any] | None = None) -> Any:
        props = self.props(own_props)
        render = render_of(self._component)
        if render is None:
            return props
        return render(props)

    def mount(self, store: Any = None) -> None:
        """Subscribe to ``store`` (or the registry's store) for projection updates."""
        if self.mounted:
            return
        self._store = store
        target = self._current_store()
        if target is None:
            _logger.warning("%s: mount without a store, no state updates will arrive", self.name)
            return
        subscribe = getattr(target, "subscribe", None)
        if not callable(subscribe):
            _logger.warning("%s: store has no subscribe(), props will not follow state", self.name)
            return
        self._last_projected = self.projected()
        self._unsubscribers = [subscribe(self._on_store_changed), *self._watch()]

    def unmount(self) -> None:
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

    def _watch(self) -> list[Callable[[], None]]:
        """Subscriptions besides the store's, held while mounted."""
        return [self._registry.subscribe_models(self._emit_props)]

    def _on_store_changed(self) -> None:
        projected = self.projected()
        if _shallow_equal(projected, self._last_projected):
            return
        self._last_projected = projected
        self._emit_props()

    def _emit_props(self) -> None:
        self.propsChanged.emit(self.props())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def _shallow_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    if a is None or b is None:
        return a is b
    if a.keys() != b.keys():
        return False
    return all(a[k] is b[k] or a[k] == b[k] for k in a)


def bind(
    registry: Registry,
    component: Any,
    actions: Mapping[str, Callable[..., Any]] | None = None,
    *,
    name: str | None = None,
) -> ConnectedComponent:
    return ConnectedComponent(registry, component, actions, name=name)
