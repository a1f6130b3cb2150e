"""Logging for hextext, built on Loguru.

hextext modules log through :func:`get_logger` and never add handlers
themselves. Output is set up once: explicitly with :func:`configure_logging`,
from a loaded ``[logging]`` table with :func:`configure_from_config` (what the
CLI does), or lazily from ``HEXTEXT_LOG_LEVEL`` / ``HEXTEXT_LOG_FORMAT`` the
first time a logger is requested.

Schema loading and validity changes log at INFO/WARNING, a failed lazy build
at ERROR with its traceback, and component registration, field resolution and
pipeline builds at DEBUG.

>>> from hextext.core.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Built pipeline '{name}'", name="title")
"""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from loguru import Logger

    from hextext.core.config.models import LoggingConfig

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

# Loguru installs a DEBUG stderr handler on import; it is replaced on first configuration
_LOGURU_DEFAULT_HANDLER = 0
_TIMESTAMP = "{time:YYYY-MM-DD HH:mm:ss} "

_current_settings: tuple[Any, ...] | None = None
_handler_ids: list[int] = []


def _console_options(
    format: LogFormat, use_color: bool, include_timestamp: bool
) -> dict[str, Any]:
    """Loguru ``add()`` keyword arguments for the stderr handler of ``format``."""
    stamp = _TIMESTAMP if include_timestamp else ""
    if format == "json":
        return {"sink": sys.stderr, "serialize": True}
    if format == "rich":
        handler = RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_time=include_timestamp,
        )
        return {"sink": handler, "format": "{message}"}
    if format == "structured":
        return {
            "sink": sys.stderr,
            "colorize": use_color and sys.stderr.isatty(),
            "format": (f"<green>{stamp}</green>" if stamp else "")
            + "<level>{level: <8}</level> "
            "<cyan>{name}:{line}</cyan> | {message}",
        }
    return {
        "sink": sys.stderr,
        "colorize": False,
        "format": f"{stamp}{{level: <8}} | {{name}} | {{message}}",
    }


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
) -> None:
    """Route hextext log records to stderr (and optionally a file).

    Calling it again with the same settings is a no-op unless
    ``force_reconfigure`` is set; different settings replace the handlers
    added by the previous call. Handlers added by the host application are
    left alone.

    Parameters
    ----------
    level : LogLevel, default="INFO"
        Minimum level written
    format : LogFormat, default="structured"
        ``console`` (plain), ``structured`` (colored when attached to a TTY),
        ``json`` (one serialized record per line) or ``rich``
    output_file : str | Path | None, default=None
        Also append JSON records to this file, rotated at 10 MB
    use_color : bool, default=True
        Allow ANSI colors in the ``structured`` format
    include_timestamp : bool, default=True
        Prefix console lines with the time
    force_reconfigure : bool, default=False
        Rebuild the handlers even if the settings are unchanged
    """
    global _current_settings

    output = str(output_file) if output_file else None
    settings = (level, format, output, use_color, include_timestamp)
    if settings == _current_settings and not force_reconfigure:
        return

    for handler_id in [_LOGURU_DEFAULT_HANDLER, *_handler_ids]:
        with suppress(ValueError):
            logger.remove(handler_id)
    _handler_ids.clear()

    _handler_ids.append(
        logger.add(level=level, **_console_options(format, use_color, include_timestamp))
    )

    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _handler_ids.append(
            logger.add(
                sink=path, level=level, serialize=True, rotation="10 MB", retention="1 week"
            )
        )

    _current_settings = settings


def configure_from_config(config: LoggingConfig, level: LogLevel | None = None) -> None:
    """Apply a loaded ``LoggingConfig``; ``level`` overrides the configured level."""
    configure_logging(
        level=level or config.level,
        format=config.format,
        output_file=config.output_file,
        use_color=config.use_color,
        include_timestamp=config.include_timestamp,
        force_reconfigure=True,
    )


@lru_cache(maxsize=256)
def get_logger(name: str) -> Logger:
    """Return the logger for a hextext module, bound with ``module=name``.

    Configures logging from the environment if nothing has configured it yet.
    """
    if _current_settings is None:
        configure_logging(
            level=os.getenv("HEXTEXT_LOG_LEVEL", "INFO").upper(),  # type: ignore[arg-type]
            format=os.getenv("HEXTEXT_LOG_FORMAT", "structured").lower(),  # type: ignore[arg-type]
        )
    return logger.bind(module=name)
