"""Text analysis command for the hextext CLI."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from hextext.cli.context import get_state
from hextext.core.exceptions import InvalidSchemaError, NoAnalyzerError, SchemaParseError
from hextext.core.text_analyzer import TextAnalyzer

console = Console()

CLI_NAME = "analyze"
CLI_HELP = "Analyze text with a field's pipeline"


def analyze(
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
    field: Annotated[str, typer.Argument(help="Field name that selects the pipeline")],
    texts: Annotated[
        list[str] | None,
        typer.Argument(help="Values to analyze (read from stdin when omitted)"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", help="Print tokens as a JSON array"),
    ] = False,
) -> None:
    """Analyze values of FIELD and print the resulting tokens.

    Several values are analyzed as one multi-valued field: their tokens are
    concatenated in value order.

    Examples
    --------
    hextext analyze schema.json title "Hello World"
    echo "<p>Hi</p>" | hextext analyze schema.json body_html --json
    """
    state = get_state(ctx)
    values = texts if texts else [sys.stdin.read()]

    try:
        analyzer = TextAnalyzer.from_file(
            schema_file,
            registry=state.registry,
            allow_dynamic_import=state.config.allow_dynamic_import,
        )
        tokens = analyzer.analyze_multi_value(field, values)
    except SchemaParseError as e:
        console.print(f"[red]✗ Schema Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except InvalidSchemaError as e:
        console.print("[red]✗ Invalid schema:[/red]")
        for message in e.messages.splitlines():
            console.print(f"  [red]✗[/red] {escape(message)}")
        raise typer.Exit(1) from e
    except NoAnalyzerError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if json_out:
        typer.echo(json.dumps(tokens, ensure_ascii=False))
    else:
        for token in tokens:
            typer.echo(token)
