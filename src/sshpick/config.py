"""Configuration with JSON file and environment overrides."""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger("sshpick.config")

# Module-level cache for singleton pattern
_config_cache: "Config | None" = None


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing or config reload."""
    global _config_cache
    _config_cache = None


def get_default_config_dir() -> Path:
    """Get default config directory, respecting SSHPICK_CONFIG_DIR env var."""
    config_dir = os.environ.get("SSHPICK_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "sshpick"


class ConfigMeta:
    """Schema definition - separate from runtime state."""

    SETTINGS: dict[str, str] = {
        "max_selected": "Most keys that can be confirmed at once",
        "show_help": "Show key bindings above the list",
        "copy_id_command": "Program used to install keys",
        "ssh_dir": "Directory scanned by --local (empty = ~/.ssh)",
        "cursor_query_timeout": "Seconds to wait for the terminal's cursor report",
        "confirm_before_run": "Ask before running commands with --run",
    }


class Config:
    """Runtime configuration with env override support."""

    DEFAULTS: dict[str, Any] = {
        "max_selected": 5,
        "show_help": True,
        "copy_id_command": "ssh-copy-id",
        "ssh_dir": "",  # Empty = ~/.ssh
        "cursor_query_timeout": 1.0,
        "confirm_before_run": True,
    }

    def __init__(self, config_dir: Path | None = None):
        self._config_dir = config_dir or get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._data: dict[str, Any] = {}

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Factory method - explicit loading with caching."""
        global _config_cache

        if _config_cache is not None and config_dir is None:
            return _config_cache

        config = cls(config_dir)
        config._load_from_file()
        config._apply_env_overrides()

        if config_dir is None:
            _config_cache = config

        return config

    def __getattr__(self, name: str) -> Any:
        """Access config values as attributes."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    @property
    def ssh_path(self) -> Path:
        """Resolved ssh directory."""
        raw = self._data.get("ssh_dir") or ""
        return Path(raw).expanduser() if raw else Path.home() / ".ssh"

    def get_settings(self) -> list[tuple[str, str, Any]]:
        """Return (name, description, value) for display."""
        return [(name, desc, getattr(self, name)) for name, desc in ConfigMeta.SETTINGS.items()]

    def set(self, key: str, value: Any) -> None:
        """Set value and persist."""
        self._data[key] = value
        self._save()

    def _load_from_file(self) -> None:
        if self._config_file.exists():
            try:
                content = self._config_file.read_text()
                if content.strip():
                    self._data = self._normalize(json.loads(content))
            except json.JSONDecodeError:
                # Corrupted config - use defaults, will be fixed on next save
                logger.warning("Ignoring unreadable config file %s", self._config_file)
                self._data = {}

    def _normalize(self, data: Any) -> dict[str, Any]:
        """Convert file values to the type of their default, dropping bad ones."""
        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: expected a JSON object", self._config_file)
            return {}
        clean: dict[str, Any] = {}
        for key, value in data.items():
            if key not in self.DEFAULTS:
                clean[key] = value
                continue
            try:
                clean[key] = self._convert(value, type(self.DEFAULTS[key]))
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid %s=%r in %s", key, value, self._config_file)
        return clean

    def _save(self) -> None:
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._config_file.write_text(json.dumps(self._data, indent=2))

    def _apply_env_overrides(self) -> None:
        """Apply SSHPICK_* env vars (highest priority)."""
        for key, default in self.DEFAULTS.items():
            env_key = f"SSHPICK_{key.upper()}"
            if env_key in os.environ:
                self._data[key] = self._coerce(os.environ[env_key], type(default))

    @classmethod
    def parse_value(cls, key: str, raw: str) -> Any:
        """Convert a command-line string to the type of setting `key`.

        Raises:
            KeyError: unknown setting.
            ValueError: raw does not parse as the setting's type.
        """
        return cls._coerce(raw, type(cls.DEFAULTS[key]))

    @classmethod
    def _convert(cls, value: Any, target_type: type) -> Any:
        if isinstance(value, str):
            return cls._coerce(value, target_type)
        if isinstance(value, bool) != (target_type is bool):
            raise TypeError(f"expected {target_type.__name__}")
        if target_type is float and isinstance(value, int):
            return float(value)
        if not isinstance(value, target_type):
            raise TypeError(f"expected {target_type.__name__}")
        return value

    @staticmethod
    def _coerce(value: str, target_type: type) -> Any:
        """Coerce string env value to target type."""
        if target_type is bool:
            return value.lower() in ("true", "1", "yes")
        if target_type is int:
            return int(value)
        if target_type is float:
            return float(value)
        return value
