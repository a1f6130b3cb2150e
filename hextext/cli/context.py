"""Shared state handed from the CLI callback to the commands."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from hextext.core.config import HexTextConfig, get_default_config, load_plugins
from hextext.core.registry import ComponentRegistry


@dataclass(frozen=True, slots=True)
class CliState:
    config: HexTextConfig
    registry: ComponentRegistry


def build_state(config: HexTextConfig) -> CliState:
    """Fresh builtin registry plus the configured plugins."""
    registry = ComponentRegistry.with_builtins()
    load_plugins(config.plugins, registry)
    return CliState(config=config, registry=registry)


def get_state(ctx: typer.Context) -> CliState:
    """State stored by the main callback, or defaults when a command runs standalone."""
    state = ctx.obj if ctx is not None else None
    if isinstance(state, CliState):
        return state
    return build_state(get_default_config())
