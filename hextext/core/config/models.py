"""Configuration data models for hextext."""

from __future__ import annotations

from dataclasses import dataclass, field

from hextext.core.logging import LogFormat, LogLevel  # noqa: TC001


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for hextext.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.hextext.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export HEXTEXT_LOG_LEVEL=DEBUG
    export HEXTEXT_LOG_FORMAT=json
    export HEXTEXT_LOG_FILE=/var/log/hextext.log
    ```
    """

    level: LogLevel = "INFO"
    format: LogFormat = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True


@dataclass(frozen=True, slots=True)
class HexTextConfig:
    """Top-level hextext configuration.

    Attributes
    ----------
    logging : LoggingConfig
        Logging settings
    plugins : tuple[str, ...]
        Modules exposing ``register_components(registry)``; loaded into the
        registry by :func:`hextext.core.config.load_plugins`
    allow_dynamic_import : bool, default=True
        Whether fallback analyzer identifiers may be imported by module path
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    plugins: tuple[str, ...] = ()
    allow_dynamic_import: bool = True
