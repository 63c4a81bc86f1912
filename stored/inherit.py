"""Explicit parent-to-child state passing.

A parent owns a ``LocalState`` handle and hands it to its children:

    local = LocalState({"open": False}, props={"title": "Cart"})
    child = registry.inherit(Drawer, local)
    child.render()["state"]          # the parent's live state dict
    child.render()["set_state"]({"open": True})

Once mounted, the child re-emits ``propsChanged`` whenever the parent state
changes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Signal

from .binder import ConnectedComponent, bind_actions
from .listeners import ListenerList
from .logger import get_logger

if TYPE_CHECKING:
    from .registry import Registry

_logger = get_logger("inherit")

StateUpdate = Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]


class LocalState(QObject):
    """Mutable local state of a parent component plus its re-render trigger."""

    stateChanged = Signal(object)

    def __init__(
        self,
        initial_state: Mapping[str, Any] | None = None,
        props: Mapping[str, Any] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._state: dict[str, Any] = dict(initial_state or {})
        self._props: dict[str, Any] = dict(props or {})
        self._mounted = True
        self._listeners = ListenerList()

    @property
    def state(self) -> dict[str, Any]:
        return self._state

    @property
    def props(self) -> dict[str, Any]:
        return self._props

    @property
    def mounted(self) -> bool:
        return self._mounted

    def set_state(self, update: StateUpdate) -> Mapping[str, Any]:
        partial = update(self._state) if callable(update) else update
        if not self._mounted:
            _logger.debug("set_state ignored: parent unmounted")
            return partial
        self._state.update(partial)
        self._notify()
        return partial

    def update(self, callback: Callable[[dict[str, Any]], Any] | None = None) -> None:
        """Run ``callback`` against the live state, then force a re-render."""
        if callback is not None:
            callback(self._state)
        if self._mounted:
            self._notify()

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self._listeners.add(listener)

    def unmount(self) -> None:
        self._mounted = False

    def _notify(self) -> None:
        self._listeners.notify()
        self.stateChanged.emit(self._state)


class InheritedComponent(ConnectedComponent):
    """Child component reading the parent's props and live state.

    Every action registered at render time is bound as a prop. While mounted,
    parent state changes re-emit ``propsChanged``.
    """

    def __init__(self, registry: Registry, component: Any, local: LocalState, parent: QObject | None = None) -> None:
        super().__init__(registry, component, None, parent=parent)
        self.local = local

    def props(self, own_props: Mapping[str, Any] | None = None) -> dict[str, Any]:
        # Actions are re-bound per call so a later register() is picked up
        self._actions = self._bind_registry_actions()
        merged = super().props(own_props)
        merged.update(self.local.props)
        merged["state"] = self.local.state
        merged["update"] = self.local.update
        merged["set_state"] = self.local.set_state
        return merged

    def _bind_registry_actions(self) -> dict[str, Callable[..., Any]]:
        return bind_actions(self._registry.actions, self._dispatch_store)

    def _watch(self) -> list[Callable[[], None]]:
        return [*super()._watch(), self.local.subscribe(self._emit_props)]


def inherit(registry: Registry, component: Any, local: LocalState) -> InheritedComponent:
    return InheritedComponent(registry, component, local)
