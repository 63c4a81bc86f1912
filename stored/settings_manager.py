from __future__ import annotations

import json
import logging
import os
from typing import Any

from .logger import get_logger, level_from_name

_logger = get_logger("settings")


class SettingsManager:
    """Diagnostic policy for a registry, optionally backed by a JSON file.

    A ``None`` path keeps everything in memory; ``STORED_SETTINGS`` supplies a
    path when none is given.
    """

    def __init__(self, settings_path: str | None = None):
        self.settings_path = settings_path or os.getenv("STORED_SETTINGS") or None
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "missing_slice_level": "error",
        "naming_conflict_level": "error",
        "warn_on_field_collision": False,
        "warn_on_reregister": False,
    }

    def load(self) -> None:
        if not self.settings_path:
            self._settings = {}
            return
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        if not self.settings_path:
            return
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _level(self, key: str) -> int:
        default = level_from_name(self.DEFAULTS[key], logging.ERROR)
        raw = self.get(key)
        level = level_from_name(raw if isinstance(raw, str) else None, -1)
        if level < 0:
            _logger.warning("invalid %s: %r, using %s", key, raw, self.DEFAULTS[key])
            return default
        return level

    @property
    def missing_slice_level(self) -> int:
        return self._level("missing_slice_level")

    @property
    def naming_conflict_level(self) -> int:
        return self._level("naming_conflict_level")

    @property
    def warn_on_field_collision(self) -> bool:
        return bool(self.get("warn_on_field_collision", False))

    @property
    def warn_on_reregister(self) -> bool:
        return bool(self.get("warn_on_reregister", False))
