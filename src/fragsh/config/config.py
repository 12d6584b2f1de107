"""
Configuration management for fragsh.

Provides a configuration file at ~/.fragsh/config.json for default settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from fragsh.core.helpers import env_flag
from fragsh.core.manifest import BUILTIN_FRAGMENTS_DIR, BUILTIN_MANIFEST

logger = logging.getLogger(__name__)

# Environment variable that turns on verbose load diagnostics
DEBUG_ENV_VAR = "FRAGSH_DEBUG"

# Default values - single source of truth
DEFAULTS = {
    "fragments_dir": str(BUILTIN_FRAGMENTS_DIR),
    "manifest": str(BUILTIN_MANIFEST),
    "debug": False,
    "simple": False,
    "prompt": "fragsh> ",
    "session_log": False,
    "history": True,
}


class Config(BaseModel):
    """Configuration settings for fragsh.

    All settings are optional. Use DEFAULTS for default values.
    """

    model_config = {"extra": "ignore"}  # Ignore unknown fields like _comment

    # Set by the --debug command-line flag; wins over FRAGSH_DEBUG
    _debug_flag: bool = PrivateAttr(default=False)

    # Fragment settings
    fragments_dir: Optional[str] = Field(
        default=None,
        description="Directory the manifest's module paths are relative to"
    )
    manifest: Optional[str] = Field(
        default=None,
        description="Manifest file mapping groups to fragments and commands"
    )
    debug: Optional[bool] = Field(
        default=None,
        description="Show fragment load failures on the console"
    )

    # REPL settings
    simple: Optional[bool] = Field(
        default=None,
        description="Use simple REPL (no prompt_toolkit)"
    )
    prompt: Optional[str] = Field(
        default=None,
        description="Prompt string"
    )
    history: Optional[bool] = Field(
        default=None,
        description="Keep command history in ~/.fragsh/history"
    )

    # Logging settings
    session_log: Optional[bool] = Field(
        default=None,
        description="Write a per-session log file under ~/.fragsh/logs"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS, then to provided default."""
        value = getattr(self, key, None)
        if value is not None:
            return value
        return DEFAULTS.get(key, default)

    def is_debug(self) -> bool:
        """Debug flag: --debug, then FRAGSH_DEBUG, then the config file."""
        if self._debug_flag:
            return True
        flag = env_flag(DEBUG_ENV_VAR)
        if flag is not None:
            return flag
        return bool(self.get("debug"))

    def fragments_path(self) -> Path:
        return Path(self.get("fragments_dir")).expanduser()

    def manifest_path(self) -> Path:
        return Path(self.get("manifest")).expanduser()


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_DIR = Path.home() / ".fragsh"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    def __init__(self):
        self._config: Optional[Config] = None

    def _ensure_dir(self) -> None:
        """Ensure config directory exists."""
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def config(self) -> Config:
        """Get the current config, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, create_if_missing: bool = False) -> Config:
        """Load configuration from file.

        Args:
            create_if_missing: If True, create default config file if it doesn't exist.

        Returns:
            Config object with loaded settings, or defaults if file doesn't exist.
        """
        if not self.CONFIG_FILE.exists():
            if create_if_missing:
                self._create_default_config()
            return Config()

        try:
            data = json.loads(self.CONFIG_FILE.read_text())
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Invalid config file ({e}), using defaults")
            return Config()

    def _create_default_config(self) -> None:
        """Create default config file with actual default values."""
        self._ensure_dir()
        default_config = {"_comment": "fragsh configuration file", **DEFAULTS}
        self.CONFIG_FILE.write_text(json.dumps(default_config, indent=2) + "\n")

    def _read_raw(self) -> dict[str, Any]:
        if not self.CONFIG_FILE.exists():
            return {}
        try:
            return json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError:
            return {}

    def save(self, config: Optional[Config] = None) -> Path:
        """Save configuration to file, preserving existing structure.

        Args:
            config: Config to save. If None, saves current config.

        Returns:
            Path to saved config file.
        """
        self._ensure_dir()
        if config is not None:
            self._config = config
        if self._config is None:
            self._config = Config()

        existing_data = self._read_raw()
        for key, value in self._config.model_dump().items():
            if value is not None:
                existing_data[key] = value

        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")
        return self.CONFIG_FILE

    def set(self, key: str, value: Any) -> None:
        """Set a config value and save.

        Raises:
            ValueError: Unknown key, or a value the field does not accept.
        """
        self._config = self.load()

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        data = self._config.model_dump()
        data[key] = value
        self._config = Config.model_validate(data)
        self.save()

    def unset(self, key: str) -> None:
        """Remove a config value (reset to default)."""
        self._config = self.load()

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        setattr(self._config, key, None)

        existing_data = self._read_raw()
        if key in existing_data:
            existing_data[key] = None

        self._ensure_dir()
        self.CONFIG_FILE.write_text(json.dumps(existing_data, indent=2) + "\n")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback."""
        return self.config.get(key, default)

    def list_settings(self) -> dict[str, Any]:
        """List user-customized settings (values that differ from defaults)."""
        result = {}
        for k, v in self.config.model_dump().items():
            if v is None:
                continue
            if k not in DEFAULTS or v != DEFAULTS[k]:
                result[k] = v
        return result

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = Config()
        if self.CONFIG_FILE.exists():
            self.CONFIG_FILE.unlink()


# Singleton instance
_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def get_config() -> Config:
    """Get the current configuration."""
    return get_config_manager().config
