"""Dispatch middleware.

Every value handed to ``store.dispatch`` is classified once at the boundary:

- ``NativeAction``: a mapping with a ``"type"`` key, forwarded to the store.
- ``PassThrough``: a mapping without ``"type"``, returned as-is (handy for
  debugging/inspection payloads).
- ``Thunk``: a callable, invoked with the store surface merged with the
  registry's models.
- ``Opaque``: anything else, returned as-is.

Only ``NativeAction`` ever reaches the underlying store.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .logger import get_logger
from .metrics import metrics

if TYPE_CHECKING:
    from .registry import Registry

_logger = get_logger("middleware")

Dispatch = Callable[[Any], Any]


@dataclass(frozen=True)
class NativeAction:
    value: Mapping[str, Any]


@dataclass(frozen=True)
class PassThrough:
    value: Mapping[str, Any]


@dataclass(frozen=True)
class Thunk:
    value: Callable[[dict[str, Any]], Any]


@dataclass(frozen=True)
class Opaque:
    value: Any


Classified = NativeAction | PassThrough | Thunk | Opaque


def classify(value: Any) -> Classified:
    if isinstance(value, Mapping):
        if "type" in value:
            return NativeAction(value)
        return PassThrough(value)
    if callable(value):
        return Thunk(value)
    return Opaque(value)


def store_surface(store: Any) -> dict[str, Any]:
    """Public primitives of a store as handed to thunks."""
    surface: dict[str, Any] = {
        "get_state": store.get_state,
        "dispatch": store.dispatch,
    }
    subscribe = getattr(store, "subscribe", None)
    if callable(subscribe):
        surface["subscribe"] = subscribe
    return surface


def thunk_context(store: Any, models: Mapping[str, Any]) -> dict[str, Any]:
    return {**store_surface(store), **models}


def create_middleware(registry: Registry) -> Callable[[Any], Callable[[Dispatch], Dispatch]]:
    """Build the store middleware bound to ``registry``.

    Shape: ``middleware(store) -> (next) -> (action) -> result``.
    """

    def middleware(store: Any) -> Callable[[Dispatch], Dispatch]:
        registry.attach_store(store)

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Any) -> Any:
                kind = classify(action)

                if isinstance(kind, NativeAction):
                    metrics.inc("dispatch.native")
                    _logger.debug("dispatch native: %s", kind.value.get("type"))
                    return next_dispatch(kind.value)

                if isinstance(kind, Thunk):
                    metrics.inc("dispatch.thunk")
                    _logger.debug("dispatch thunk: %s", getattr(kind.value, "__name__", kind.value))
                    return kind.value(thunk_context(store, registry.models))

                if isinstance(kind, PassThrough):
                    metrics.inc("dispatch.pass_through")
                    _logger.debug("dispatch pass-through: %r", kind.value)
                    return kind.value

                metrics.inc("dispatch.opaque")
                _logger.debug("dispatch opaque: %r", kind.value)
                return kind.value

            return dispatch

        return wrap

    return middleware
