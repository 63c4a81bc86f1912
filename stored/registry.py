"""Registry: the context object that ties actions, models and the store together.

One registry is created by the application's assembly code and handed to
everything that needs it:

    registry = Registry()
    store = Store(reducer, initial_state, middlewares=[registry.middleware])
    components = registry.register({"Card": Card}, actions, models)

- ``registry.middleware`` is installed on the store; the store is captured
  into the registry the moment the middleware is applied.
- ``register`` merges models (skipping names that clash with actions),
  replaces the action set and wraps every component.
- ``bind`` wraps a single component outside of ``register``.
- ``inherit`` wraps a child component that reads live state from a parent
  ``LocalState`` handle.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from PySide6.QtCore import QObject, Signal

from .binder import ConnectedComponent, bind
from .inherit import InheritedComponent, LocalState, inherit
from .listeners import ListenerList
from .logger import get_logger
from .middleware import create_middleware
from .registration import register
from .settings_manager import SettingsManager

_logger = get_logger("registry")


class StoreNotAttachedError(RuntimeError):
    """A bound action was called before any store installed the middleware."""


class Registry(QObject):
    storeAttached = Signal(object)
    actionsChanged = Signal()
    modelsChanged = Signal()

    def __init__(self, settings: SettingsManager | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.settings = settings or SettingsManager()
        self._actions: dict[str, Callable[..., Any]] = {}
        self._models: dict[str, Any] = {}
        self._args: dict[str, Any] = {}
        self._store: Any = None
        self._registered = False
        self._model_listeners = ListenerList()
        self.middleware = create_middleware(self)

    # ---- read access ----
    @property
    def actions(self) -> dict[str, Callable[..., Any]]:
        return self._actions

    @property
    def models(self) -> dict[str, Any]:
        return self._models

    @property
    def args(self) -> dict[str, Any]:
        return self._args

    @property
    def store(self) -> Any:
        return self._store

    def require_store(self) -> Any:
        if self._store is None:
            raise StoreNotAttachedError("no store has installed this registry's middleware yet")
        return self._store

    # ---- mutation ----
    def attach_store(self, store: Any) -> None:
        if store is self._store:
            return
        self._store = store
        _logger.debug("store attached: %r", store)
        self.storeAttached.emit(store)

    def merge_models(self, models: Mapping[str, Any], actions: Mapping[str, Any]) -> list[str]:
        """Install ``models`` entry by entry; names taken by ``actions`` are skipped.

        Returns the skipped names.
        """
        skipped: list[str] = []
        for key, value in models.items():
            if key in actions:
                skipped.append(key)
                _logger.log(
                    self.settings.naming_conflict_level,
                    "Function named '%s' is already exist in props, calling it from component will not work.",
                    key,
                )
                continue
            self._models[key] = value
        if len(skipped) < len(models):
            self._notify_models()
        return skipped

    def set_actions(self, actions: Mapping[str, Callable[..., Any]]) -> None:
        if self._registered and self.settings.warn_on_reregister:
            _logger.warning(
                "register called again: replacing %d action(s) with %d",
                len(self._actions),
                len(actions),
            )
        self._actions = dict(actions)
        self._registered = True
        self.actionsChanged.emit()

    def get_arg(self, name: str) -> Any:
        return self._args.get(name)

    def set_args(self, data: Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]) -> None:
        items = data(self._args) if callable(data) else data
        for name, value in items.items():
            self._args[name] = value
        self._notify_models()

    def subscribe_models(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` after models or ``args`` change; returns the unsubscribe."""
        return self._model_listeners.add(listener)

    def _notify_models(self) -> None:
        self._model_listeners.notify()
        self.modelsChanged.emit()

    # ---- entry points ----
    def register(
        self,
        component_defs: Mapping[str, Any],
        actions: Mapping[str, Callable[..., Any]] | None = None,
        models: Mapping[str, Any] | None = None,
    ) -> dict[str, ConnectedComponent]:
        return register(self, component_defs, actions, models)

    def bind(
        self,
        component: Any,
        actions: Mapping[str, Callable[..., Any]] | None = None,
        *,
        name: str | None = None,
    ) -> ConnectedComponent:
        return bind(self, component, actions, name=name)

    def inherit(self, component: Any, parent: LocalState) -> InheritedComponent:
        return inherit(self, component, parent)
