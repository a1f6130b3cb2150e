"""Configuration loading for hextext."""

from hextext.core.config.loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
    load_plugins,
)
from hextext.core.config.models import HexTextConfig, LoggingConfig

__all__ = [
    "ConfigLoader",
    "HexTextConfig",
    "LoggingConfig",
    "clear_config_cache",
    "get_default_config",
    "load_config",
    "load_plugins",
]
