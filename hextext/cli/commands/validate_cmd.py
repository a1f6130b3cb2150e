"""Schema validation command for the hextext CLI."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hextext.cli.context import get_state
from hextext.core.exceptions import InvalidSchemaError, SchemaParseError
from hextext.core.text_analyzer import TextAnalyzer

console = Console()

CLI_NAME = "validate"
CLI_HELP = "Validate an analysis schema"


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


def validate(
    ctx: typer.Context,
    schema_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the JSON analysis schema",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    fields: Annotated[
        list[str] | None,
        typer.Option(
            "--field",
            "-f",
            help="Resolve this field too, building its pipeline (repeatable)",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format (text, json)"),
    ] = OutputFormat.TEXT,
) -> None:
    """Validate an analysis schema.

    Static checks cover the match version, duplicate names, field rule shape,
    regex syntax and fallback analyzer references. Pipelines are only built
    for the fields given with ``--field``, which surfaces unknown component
    types and bad parameters.

    Examples
    --------
    hextext validate schema.json
    hextext validate schema.json --field title --field body_html
    """
    state = get_state(ctx)
    try:
        analyzer = TextAnalyzer.from_file(
            schema_file,
            registry=state.registry,
            allow_dynamic_import=state.config.allow_dynamic_import,
        )
    except SchemaParseError as e:
        _report_parse_error(schema_file, e, output_format)
        raise typer.Exit(1) from e

    resolved: dict[str, str | None] = {}
    for field in fields or []:
        try:
            pipeline = analyzer.get_field_analyzer(field)
        except InvalidSchemaError:
            break
        resolved[field] = pipeline.name if pipeline is not None else None

    unmatched = [field for field, name in resolved.items() if name is None]
    messages = analyzer.invalid_messages.splitlines()
    ok = analyzer.is_valid and not unmatched

    if output_format == OutputFormat.JSON:
        typer.echo(
            json.dumps(
                {
                    "schema": str(schema_file),
                    "valid": ok,
                    "messages": messages,
                    "fields": resolved,
                },
                indent=2,
            )
        )
    else:
        _print_text_report(schema_file, ok, messages, resolved)

    if not ok:
        raise typer.Exit(1)


def _report_parse_error(
    schema_file: Path, error: SchemaParseError, output_format: OutputFormat
) -> None:
    if output_format == OutputFormat.JSON:
        typer.echo(
            json.dumps(
                {
                    "schema": str(schema_file),
                    "valid": False,
                    "messages": error.errors or [error.reason],
                    "fields": {},
                },
                indent=2,
            )
        )
        return

    console.print(f"[red]✗ Schema Error:[/red] {escape(error.reason)}")
    for detail in error.errors:
        console.print(f"  [red]✗[/red] {escape(detail)}")


def _print_text_report(
    schema_file: Path, ok: bool, messages: list[str], resolved: dict[str, str | None]
) -> None:
    console.print()
    if ok:
        console.print(f"[green]✓ Validation successful:[/green] {schema_file}")
    else:
        console.print(f"[red]✗ Validation failed:[/red] {schema_file}")
        if messages:
            console.print()
            console.print("[red]Errors:[/red]")
        for message in messages:
            console.print(f"  [red]✗[/red] {escape(message)}")

    if resolved:
        console.print()
        table = Table(show_header=True, border_style="cyan")
        table.add_column("Field", style="green")
        table.add_column("Pipeline", style="white")
        for field, name in resolved.items():
            pipeline = escape(name) if name is not None else "[red]no analyzer[/red]"
            table.add_row(escape(field), pipeline)
        console.print(table)
    console.print()
