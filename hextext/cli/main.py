"""hextext CLI - Main entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, get_args

import typer
from rich.console import Console

from hextext.cli.commands import analyze_cmd, components_cmd, validate_cmd
from hextext.cli.context import build_state
from hextext.core.config import load_config
from hextext.core.exceptions import ConfigurationError
from hextext.core.logging import LogLevel, configure_from_config

app = typer.Typer(
    name="hextext",
    help="hextext - schema-driven text analysis.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command(name=validate_cmd.CLI_NAME, help=validate_cmd.CLI_HELP)(validate_cmd.validate)
app.command(name=analyze_cmd.CLI_NAME, help=analyze_cmd.CLI_HELP)(analyze_cmd.analyze)
app.command(name=components_cmd.CLI_NAME, help=components_cmd.CLI_HELP)(
    components_cmd.components
)


def _version_callback(value: bool) -> None:
    if value:
        from hextext import __version__

        console.print(f"[bold blue]hextext[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to hextext.toml or pyproject.toml"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level: debug|info|warning|error"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """hextext CLI - lint schemas, analyze text and inspect components.

    Global flags are resolved here and stored on ``ctx.obj`` for subcommands.
    """
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]✗ Configuration Error:[/red] {e}")
        raise typer.Exit(1) from e

    level = log_level.upper() if log_level else config.logging.level
    if level == "WARN":
        level = "WARNING"
    if level not in get_args(LogLevel):
        console.print(f"[red]✗ Unknown log level:[/red] {log_level}")
        raise typer.Exit(2)
    configure_from_config(config.logging, level=level)  # type: ignore[arg-type]

    try:
        ctx.obj = build_state(config)
    except ConfigurationError as e:
        console.print(f"[red]✗ Plugin Error:[/red] {e}")
        raise typer.Exit(1) from e


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
