"""Configuration management for fragsh."""

from fragsh.config.config import (
    DEBUG_ENV_VAR,
    DEFAULTS,
    Config,
    ConfigManager,
    get_config,
    get_config_manager,
)

__all__ = [
    "DEBUG_ENV_VAR",
    "DEFAULTS",
    "Config",
    "ConfigManager",
    "get_config",
    "get_config_manager",
]
