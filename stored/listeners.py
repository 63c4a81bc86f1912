from __future__ import annotations

from collections.abc import Callable
from typing import Any


class ListenerList:
    """Plain-Python subscriber list used for wiring between stored objects.

    Listeners run in subscription order. Each ``add`` returns an idempotent
    unsubscribe callable. Qt signals stay the outward notification surface;
    this keeps internal subscriptions out of Qt's connection bookkeeping.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[..., Any]] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, listener: Callable[..., Any]) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            subscribed = False
            self._listeners.remove(listener)

        return unsubscribe

    def notify(self, *args: Any) -> None:
        # Snapshot so listeners may (un)subscribe while being notified
        for listener in list(self._listeners):
            listener(*args)
