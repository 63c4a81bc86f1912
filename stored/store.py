from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from PySide6.QtCore import QObject, Signal

from .listeners import ListenerList
from .logger import get_logger

_logger = get_logger("store")

INIT_ACTION_TYPE = "@@stored/INIT"

Reducer = Callable[[Any, Mapping[str, Any]], Any]
Listener = Callable[[], None]


class Store(QObject):
    """Minimal state container the binder talks to.

    Holds one state snapshot that only the reducer replaces. Listeners (and the
    ``stateChanged`` signal) fire after the new state is committed, in
    subscription order, and only when the reducer returned a new object.

    Middleware receive the store itself; ``store.dispatch`` always goes through
    the full middleware chain.
    """

    stateChanged = Signal(object)

    def __init__(
        self,
        reducer: Reducer,
        initial_state: Any = None,
        middlewares: Iterable[Callable[[Any], Callable]] = (),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if not callable(reducer):
            raise TypeError("reducer must be callable")
        self._reducer = reducer
        self._state = initial_state
        self._listeners = ListenerList()
        self._reducing = False

        dispatch: Callable[[Any], Any] = self._base_dispatch
        chain = [m(self) for m in middlewares]
        for wrap in reversed(chain):
            dispatch = wrap(dispatch)
        self._dispatch = dispatch

        self._base_dispatch({"type": INIT_ACTION_TYPE})

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        return self._dispatch(action)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._listeners.add(listener)

    def _base_dispatch(self, action: Any) -> Any:
        if not isinstance(action, Mapping) or "type" not in action:
            raise TypeError(f"actions reaching the store must be mappings with a 'type' key, got {action!r}")
        if self._reducing:
            raise RuntimeError("reducers may not dispatch actions")

        self._reducing = True
        try:
            new_state = self._reducer(self._state, action)
        finally:
            self._reducing = False

        if new_state is not self._state:
            self._state = new_state
            _logger.debug("state changed by %s", action.get("type"))
            self._listeners.notify()
            self.stateChanged.emit(new_state)
        return action
