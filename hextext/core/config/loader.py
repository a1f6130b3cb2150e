"""TOML configuration loader for hextext."""

from __future__ import annotations

import importlib
import os
import re
import tomllib
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, get_args

from hextext.core.config.models import HexTextConfig, LoggingConfig
from hextext.core.exceptions import ConfigurationError
from hextext.core.logging import LogFormat, LogLevel, get_logger

if TYPE_CHECKING:
    from hextext.core.registry import ComponentRegistry

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

CONFIG_FILE_NAMES = ("hextext.toml", "pyproject.toml", ".hextext.toml")

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> HexTextConfig:
    return ConfigLoader()._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes hextext configuration from TOML files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_from_toml(self, path: str | Path | None = None) -> HexTextConfig:
        """Load configuration from a TOML file.

        Parameters
        ----------
        path : str | Path | None
            Path to TOML file. If None, searches ``HEXTEXT_CONFIG_PATH``, then
            hextext.toml, pyproject.toml and .hextext.toml in the working directory

        Returns
        -------
        HexTextConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        FileNotFoundError
            If an explicit path does not exist or no file is found by search
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> HexTextConfig:
        logger.debug("Loading configuration from {path}", path=config_path)

        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(str(config_path), f"invalid TOML: {e}") from e

        if "tool" in data and "hextext" in data.get("tool", {}):
            hextext_data = data["tool"]["hextext"]
        elif config_path.name == "pyproject.toml":
            logger.debug("No [tool.hextext] section found in pyproject.toml, using defaults")
            hextext_data = {}
        else:
            # Flat format (top-level keys)
            hextext_data = data

        hextext_data = self._substitute_env_vars(hextext_data)
        return self._parse_config(hextext_data)

    def _find_config_file(self, path: str | Path | None) -> Path:
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("HEXTEXT_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from HEXTEXT_CONFIG_PATH: {path}", path=config_path)
                return config_path
            logger.warning("HEXTEXT_CONFIG_PATH set but file not found: {path}", path=config_path)

        for name in CONFIG_FILE_NAMES:
            search_path = Path(name)
            if search_path.exists():
                return search_path

        raise FileNotFoundError(
            f"No configuration file found. Searched for: {', '.join(CONFIG_FILE_NAMES)}"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` with environment values; unknown names are kept."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{name}}} not found, keeping placeholder",
                        name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> HexTextConfig:
        plugins = data.get("plugins", [])
        if not isinstance(plugins, list) or not all(isinstance(p, str) for p in plugins):
            raise ConfigurationError("plugins", "expected a list of module names")

        allow_dynamic_import = data.get("allow_dynamic_import", True)
        if env_dynamic := os.getenv("HEXTEXT_ALLOW_DYNAMIC_IMPORT"):
            try:
                allow_dynamic_import = _parse_bool_env(env_dynamic)
            except ValueError as e:
                logger.warning("Invalid HEXTEXT_ALLOW_DYNAMIC_IMPORT value: {error}", error=e)
        if not isinstance(allow_dynamic_import, bool):
            raise ConfigurationError("allow_dynamic_import", "expected true or false")

        return HexTextConfig(
            logging=self._parse_logging_config(data.get("logging", {})),
            plugins=tuple(plugins),
            allow_dynamic_import=allow_dynamic_import,
        )

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over TOML configuration:
        - HEXTEXT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - HEXTEXT_LOG_FORMAT: Output format (console, json, structured, rich)
        - HEXTEXT_LOG_FILE: Optional file path for log output
        """
        level = str(logging_data.get("level", "INFO")).upper()
        format_type = str(logging_data.get("format", "structured")).lower()
        output_file = logging_data.get("output_file")

        if env_level := os.getenv("HEXTEXT_LOG_LEVEL"):
            level = env_level.upper()
        if env_format := os.getenv("HEXTEXT_LOG_FORMAT"):
            format_type = env_format.lower()
        if env_file := os.getenv("HEXTEXT_LOG_FILE"):
            output_file = env_file

        if level not in get_args(LogLevel):
            raise ConfigurationError("logging", f"unknown level {level!r}")
        if format_type not in get_args(LogFormat):
            raise ConfigurationError("logging", f"unknown format {format_type!r}")

        return LoggingConfig(
            level=level,  # type: ignore[arg-type]
            format=format_type,  # type: ignore[arg-type]
            output_file=output_file,
            use_color=bool(logging_data.get("use_color", True)),
            include_timestamp=bool(logging_data.get("include_timestamp", True)),
        )


def load_config(path: str | Path | None = None) -> HexTextConfig:
    """Load configuration from a TOML file, or return defaults when none is found.

    An explicit ``path`` that does not exist is an error.
    """
    loader = ConfigLoader()
    if path is not None:
        return loader.load_from_toml(path)
    try:
        return loader.load_from_toml(None)
    except FileNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return get_default_config()


def get_default_config() -> HexTextConfig:
    """Default configuration, with logging env overrides applied."""
    return ConfigLoader()._parse_config({})


def clear_config_cache() -> None:
    """Clear the configuration cache (after editing config files, or between tests)."""
    _load_and_parse_cached.cache_clear()


def load_plugins(modules: Iterable[str], registry: ComponentRegistry) -> int:
    """Import plugin modules and let each register its components.

    Each module must define ``register_components(registry)``.

    Returns
    -------
    int
        Number of plugin modules loaded

    Raises
    ------
    ConfigurationError
        If a module cannot be imported or has no ``register_components``
    """
    loaded = 0
    for module_name in modules:
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigurationError("plugins", f"cannot import '{module_name}': {e}") from e

        register = getattr(module, "register_components", None)
        if not callable(register):
            raise ConfigurationError(
                "plugins", f"'{module_name}' does not define register_components(registry)"
            )
        register(registry)
        loaded += 1
        logger.debug("Loaded plugin {module}", module=module_name)
    return loaded
