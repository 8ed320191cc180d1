"""Configuration resolver with 4-level priority.

Priority (highest to lowest):
1. Explicit overrides (``cli_args``)
2. Environment variables (CRUDFM_*)
3. Config files (user > system)
4. Defaults
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from crudfm.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

ENV_PREFIX = "CRUDFM_"


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class LoggingPolicy:
    """Resolved, immutable logging policy."""

    level_name: str  # quiet | normal | verbose | debug
    emit_error: bool
    emit_warning: bool
    emit_info: bool
    emit_verbose: bool
    emit_debug: bool
    source: ConfigSource
    color: bool = True


def _flatten_keys(data: dict[str, Any], prefix: str = "") -> set[str]:
    """Flatten nested dicts to dot-notation leaf keys."""
    keys: set[str] = set()
    for key, value in data.items():
        key_path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            keys.update(_flatten_keys(value, key_path))
        else:
            keys.add(key_path)
    return keys


class ConfigResolver:
    """Resolve configuration with strict 4-level priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'storage': {'roots': {'documents_dir': '/srv/docs'}}},
            user_config_path=Path('~/.config/crudfm/config.yaml'),
        )

        value, source = resolver.resolve('storage.roots.documents_dir')
        # value = '/srv/docs', source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Explicit overrides (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/crudfm/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/crudfm/config.yaml")
        self.defaults = defaults if defaults is not None else self._default_config()

        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'logging.level')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._get_nested(self.cli_args, key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._get_nested(self._get_user_config(), key)
        if value is not None:
            return value, "user_config"

        value = self._get_nested(self._get_system_config(), key)
        if value is not None:
            return value, "system_config"

        value = self._get_nested(self.defaults, key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    def resolve_all(self) -> dict[str, ConfigSource]:
        """Resolve every key found in defaults, overrides and config files."""
        all_keys: set[str] = set()
        all_keys.update(_flatten_keys(self.defaults))
        all_keys.update(_flatten_keys(self.cli_args))
        all_keys.update(_flatten_keys(self._get_user_config()))
        all_keys.update(_flatten_keys(self._get_system_config()))

        result: dict[str, ConfigSource] = {}
        for key in sorted(all_keys):
            try:
                value, source = self.resolve(key)
            except ConfigError:
                continue
            result[key] = ConfigSource(value=value, source=source)
        return result

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Allowed values (after normalization): quiet | normal | verbose | debug.
        Falls back to DEFAULT_LOGGING_LEVEL when no source provides the key.

        Raises:
            ConfigError: If the resolved value is invalid.
        """
        level, _src = self._resolve_logging_level_and_source()
        return level

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Resolve the logging policy. Side-effect free."""
        level_name, src = self._resolve_logging_level_and_source()
        return LoggingPolicy(
            level_name=level_name,
            emit_error=True,
            emit_warning=True,
            emit_info=level_name != "quiet",
            emit_verbose=level_name in {"verbose", "debug"},
            emit_debug=level_name == "debug",
            source=src,
            color=self._resolve_logging_color(),
        )

    def _resolve_logging_color(self) -> bool:
        key = "logging.color"
        try:
            value, _src = self.resolve(key)
        except ConfigError:
            return True

        if isinstance(value, bool):
            return value
        norm = str(value).strip().lower()
        if norm in _TRUE_VALUES:
            return True
        if norm in _FALSE_VALUES:
            return False
        raise ConfigError(f"Invalid '{key}': {value!r}. Expected a boolean")

    def _resolve_logging_level_and_source(self) -> tuple[str, ConfigSource]:
        key = "logging.level"
        try:
            value, source = self.resolve(key)
        except ConfigError:
            return DEFAULT_LOGGING_LEVEL, ConfigSource(value=DEFAULT_LOGGING_LEVEL, source="default")

        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        norm = value.strip().lower()
        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")

        return norm, ConfigSource(value=norm, source=source)

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Environment variable format: CRUDFM_KEY_NAME
        Example: CRUDFM_STORAGE_ROOTS_DOCUMENTS_DIR
        """
        env_key = f"{ENV_PREFIX}{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _get_user_config(self) -> dict[str, Any]:
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file."""
        if not path.exists():
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'logging': {'level': 'debug'}}
            _get_nested(data, 'logging.level') -> 'debug'
        """
        current: Any = data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        home = Path.home()
        return {
            "storage": {
                "roots": {
                    "documents_dir": str(home / "Documents"),
                    "caches_dir": str(home / ".cache" / "crudfm"),
                    "application_support_dir": str(home / ".local" / "share" / "crudfm"),
                    "downloads_dir": str(home / "Downloads"),
                    "temporary_dir": str(Path(tempfile.gettempdir()) / "crudfm"),
                },
            },
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
            "diagnostics": {
                "enabled": False,
                "dir": str(home / ".local" / "state" / "crudfm" / "diagnostics"),
            },
        }
