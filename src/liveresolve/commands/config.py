"""The ``liveresolve config`` command group -- inspect and edit the global config."""

from __future__ import annotations

import typer

from liveresolve.config import (
    global_config_path,
    load_global_config,
    save_global_config,
    set_config_value,
)
from liveresolve.output import format_response, print_data, success


config_app = typer.Typer(no_args_is_help=True)
"""Typer application for the ``config`` command group."""


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration (files, environment and flags merged)."""
    config = ctx.obj["config"]
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the location of the global config file."""
    print_data(str(global_config_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Dotted key, e.g. output.format."),
    value: str = typer.Argument(..., help="New value."),
) -> None:
    """Set a value in the global config file."""
    updated = set_config_value(load_global_config(), key, value)
    save_global_config(updated)
    success(f"Set {key} = {value}")
