"""Typer entry point for the `hex` CLI.

Commands are registered explicitly from `COMMANDS` / `SUBCOMMANDS` when the
app is built; there is no import-time self-registration.
"""

from __future__ import annotations

import logging
from typing import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli import doctor, key
from cli.state import CliState

COMMANDS: dict[str, tuple[Callable[..., None], str]] = {
    "key": (key.key, key.HELP),
}

SUBCOMMANDS: dict[str, typer.Typer] = {
    "doctor": doctor.app,
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Manage hex.pm API keys from the command line."""

    ctx.ensure_object(CliState)
    configure_logging(verbose)


def build_app() -> typer.Typer:
    app = typer.Typer(no_args_is_help=True, add_completion=False)
    app.callback()(_callback)
    for name, (handler, help_text) in COMMANDS.items():
        app.command(name=name, help=help_text)(handler)
    for name, sub_app in SUBCOMMANDS.items():
        app.add_typer(sub_app, name=name)
    return app


app = build_app()


def run() -> None:
    app()
