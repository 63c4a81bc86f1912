"""Bind UI components to a shared store, actions and models.

Usage:
    from stored import Registry, Store

    registry = Registry()
    store = Store(reducer, {"cart": {"items": [], "total": 0}}, middlewares=[registry.middleware])

    Card.field_map = {"cart": ["items", "total"]}
    components = registry.register({"Card": Card}, {"checkout": checkout}, {"theme": "dark"})
    components["Card"].mount()
    components["Card"].render()
"""

from .binder import ConnectedComponent, bind
from .inherit import InheritedComponent, LocalState, inherit
from .middleware import NativeAction, Opaque, PassThrough, Thunk, classify
from .projector import project
from .registration import register
from .registry import Registry, StoreNotAttachedError
from .settings_manager import SettingsManager
from .store import Store

__all__ = [
    "ConnectedComponent",
    "InheritedComponent",
    "LocalState",
    "NativeAction",
    "Opaque",
    "PassThrough",
    "Registry",
    "SettingsManager",
    "Store",
    "StoreNotAttachedError",
    "Thunk",
    "bind",
    "classify",
    "inherit",
    "project",
    "register",
]
