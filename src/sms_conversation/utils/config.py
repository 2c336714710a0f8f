"""Settings storage for the conversation window and its plugins."""

from __future__ import annotations

import json
from collections.abc import Callable
from enum import IntFlag
from pathlib import Path
from typing import Any

APP_ID = "sms-conversation"
CONFIG_DIR = Path.home() / ".config" / APP_ID
SETTINGS_FILE = CONFIG_DIR / "settings.json"

SettingsCallback = Callable[[str, Any], None]


class AllowFlags(IntFlag):
    """Bits of a plugin's "allow" setting."""
    NONE = 0
    SEND = 2
    RECEIVE = 4


class Settings:
    """Key/value settings persisted as JSON, with change notifications."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or SETTINGS_FILE
        self._values: dict[str, Any] = {}
        self._handlers: dict[int, tuple[str, SettingsCallback]] = {}
        self._next_handler_id = 1
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text())
            except json.JSONDecodeError as e:
                print(f"Error reading settings {self.path}: {e}")
                data = {}
            self._values = data if isinstance(data, dict) else {}
        else:
            self._values = {}

    def _save(self) -> None:
        """Save settings to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a settings value."""
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a settings value, notifying handlers if it changed."""
        if key in self._values and self._values[key] == value:
            return
        self._values[key] = value
        self._save()
        self._emit(key, value)

    def get_boolean(self, key: str, default: bool = False) -> bool:
        return bool(self._values.get(key, default))

    def set_boolean(self, key: str, value: bool) -> None:
        self.set(key, bool(value))

    def get_uint(self, key: str, default: int = 0) -> int:
        value = self._values.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return default
        return value

    def set_uint(self, key: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{key} must be an unsigned integer, got {value!r}")
        self.set(key, value)

    def get_value(self, key: str, default: dict[str, Any] | None = None) -> dict[str, Any]:
        """Get a structured (map) value. Returns a copy."""
        value = self._values.get(key)
        if not isinstance(value, dict):
            return dict(default or {})
        return json.loads(json.dumps(value))

    def set_value(self, key: str, value: dict[str, Any]) -> None:
        """Set a structured (map) value. It must be JSON serializable."""
        self.set(key, json.loads(json.dumps(value)))

    def connect(self, key: str, callback: SettingsCallback) -> int:
        """Call `callback(key, value)` whenever `key` changes.

        Returns a handler ID for `disconnect()`.
        """
        handler_id = self._next_handler_id
        self._next_handler_id += 1
        self._handlers[handler_id] = (key, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def _emit(self, key: str, value: Any) -> None:
        for watched, callback in list(self._handlers.values()):
            if watched == key:
                callback(key, value)

    def plugin(self, name: str) -> PluginSettings:
        """Get the settings scoped to a plugin."""
        return PluginSettings(self, name)


class PluginSettings:
    """Settings of a single plugin, stored under `plugins.<name>.<key>`."""

    DEFAULT_ALLOW = AllowFlags.SEND | AllowFlags.RECEIVE

    def __init__(self, settings: Settings, name: str) -> None:
        self.settings = settings
        self.name = name

    def key(self, key: str) -> str:
        return f"plugins.{self.name}.{key}"

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(self.key(key), default)

    def set(self, key: str, value: Any) -> None:
        self.settings.set(self.key(key), value)

    def connect(self, key: str, callback: SettingsCallback) -> int:
        return self.settings.connect(self.key(key), callback)

    @property
    def allow(self) -> AllowFlags:
        """Get the plugin's permission bits."""
        return AllowFlags(
            self.settings.get_uint(self.key("allow"), int(self.DEFAULT_ALLOW))
            & int(AllowFlags.SEND | AllowFlags.RECEIVE)
        )

    @allow.setter
    def allow(self, value: AllowFlags | int) -> None:
        self.settings.set_uint(self.key("allow"), int(value))

    def is_allowed(self, flag: AllowFlags) -> bool:
        return bool(self.allow & flag)

    def set_allowed(self, flag: AllowFlags, enabled: bool) -> None:
        """Turn a permission bit on or off."""
        current = self.allow
        self.allow = (current | flag) if enabled else (current & ~flag)

    def toggle_allowed(self, flag: AllowFlags) -> bool:
        """Flip a permission bit. Returns the new state."""
        self.allow = self.allow ^ flag
        return self.is_allowed(flag)
