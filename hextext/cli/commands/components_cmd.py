"""Component listing command for the hextext CLI."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from hextext.cli.context import get_state
from hextext.core.registry import ComponentType

console = Console()

CLI_NAME = "components"
CLI_HELP = "List the registered analysis components"


def components(
    ctx: typer.Context,
    component_type: Annotated[
        ComponentType | None,
        typer.Option("--type", "-t", help="Only list this component type"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """List char filters, tokenizers, token filters and fallback analyzers."""
    state = get_state(ctx)
    entries = state.registry.list_components(component_type)

    if json_out:
        data = [
            {
                "name": entry.name,
                "type": entry.component_type.value,
                "namespace": entry.namespace,
                "description": entry.summary,
            }
            for entry in entries
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(title="Registered Components", show_header=True, border_style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Name", style="green", overflow="fold")
    table.add_column("Namespace", style="white")
    table.add_column("Description", style="dim")
    for entry in entries:
        table.add_row(entry.component_type.value, entry.name, entry.namespace, entry.summary)
    console.print(table)
    console.print(f"\n[dim]{len(entries)} components[/dim]")
