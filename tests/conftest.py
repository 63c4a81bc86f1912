"""Pytest configuration.

Registry, Store and wrapped components are QObjects with signals. A single
`QCoreApplication` is created for the whole session so signal delivery works the
same way it does inside an application.

The project logger does not propagate to the root logger, so `caplog` is hooked
onto it explicitly through the `stored_caplog` fixture.

Tests observe Qt signals through `signal_spy`, which connects a plain Python
function and disconnects it again at teardown. QObjects created by a test are
collected right after it, while Qt is still fully alive, instead of piling up
until interpreter shutdown.
"""

from __future__ import annotations

import gc
import logging
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""

    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP

    app = QCoreApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QCoreApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Release leftover QObjects and shut Qt down before interpreter exit."""

    gc.collect()

    try:
        from PySide6.QtCore import QCoreApplication, QEvent
    except ImportError:
        return

    app = QCoreApplication.instance()
    if app is None:
        return

    # Request shutdown and pump events once so posted events can settle.
    app.quit()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)
    app.processEvents()


@pytest.fixture(autouse=True)
def _collect_qobjects():
    yield
    gc.collect()


@pytest.fixture
def signal_spy():
    """Record signal emissions: `seen = signal_spy(obj.someSignal)`."""

    connections: list = []

    def spy(signal) -> list:
        seen: list = []

        def record(*args) -> None:
            seen.append(args[0] if len(args) == 1 else args)

        signal.connect(record)
        connections.append((signal, record))
        return seen

    yield spy

    for signal, record in connections:
        try:
            signal.disconnect(record)
        except RuntimeError:
            # The signal's source QObject was already deleted by the test.
            pass


@pytest.fixture
def stored_caplog(caplog):
    from stored.logger import setup_logger

    base = setup_logger()
    base.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger="stored")
    try:
        yield caplog
    finally:
        base.removeHandler(caplog.handler)


def counter_reducer(state, action):
    if action["type"] == "INCREMENT":
        counter = dict(state["counter"])
        counter["value"] += action.get("by", 1)
        return {**state, "counter": counter}
    if action["type"] == "ADD_ITEM":
        cart = dict(state["cart"])
        cart["items"] = [*cart["items"], action["item"]]
        cart["total"] = len(cart["items"])
        return {**state, "cart": cart}
    return state


@pytest.fixture
def initial_state() -> dict:
    return {"cart": {"items": [1, 2], "total": 2}, "counter": {"value": 0}}


@pytest.fixture
def recorded_reducer():
    seen: list[dict] = []

    def reducer(state, action):
        seen.append(dict(action))
        return counter_reducer(state, action)

    reducer.seen = seen  # type: ignore[attr-defined]
    return reducer


@pytest.fixture
def registry():
    from stored.registry import Registry

    return Registry()


@pytest.fixture
def store(registry, recorded_reducer, initial_state):
    from stored.store import Store

    return Store(recorded_reducer, initial_state, middlewares=[registry.middleware])
