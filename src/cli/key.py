"""`hex key` command: generate, fetch, list and revoke API keys."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import List, Optional

import typer
from rich.console import Console

from adapters.hex_client import HexClient
from cli.state import CliState
from cli.ui_components import ConsolePresenter, print_error
from core.config import resolve_config, resolve_repo
from core.errors import HexKeyError
from core.services.error_formatter import format_error
from core.services.key_commands import CommandRequest, KeyCommandDispatcher

logger = logging.getLogger(__name__)

_console = Console()
_err_console = Console(stderr=True)

HELP = """Generate, fetch, list or revoke API keys associated with your account.

\b
Examples:
  hex key generate -k ci-token -p api:read -p api:write
  hex key fetch -k ci-token
  hex key list
  hex key revoke -k ci-token
  hex key revoke --all
"""


def build_request(
    task: str,
    *,
    key_name: str | None = None,
    permission: list[str] | None = None,
    all_keys: bool = False,
) -> CommandRequest:
    """Keep only the options the user actually supplied."""

    options: dict[str, object] = {}
    if key_name is not None:
        options["keyname"] = key_name
    if permission:
        options["permission"] = list(permission)
    if all_keys:
        options["all"] = True
    return CommandRequest(operation=task, options=options)


def key(
    ctx: typer.Context,
    task: str = typer.Argument(..., metavar="TASK", help="generate | fetch | list | revoke"),
    key_name: Optional[str] = typer.Option(None, "--key-name", "-k", help="Name of the key."),
    permission: Optional[List[str]] = typer.Option(
        None,
        "--permission",
        "-p",
        help="Permission as DOMAIN:RESOURCE (generate only, repeatable).",
    ),
    all_keys: bool = typer.Option(False, "--all", "-a", help="Revoke every key (revoke only)."),
    repo: Optional[str] = typer.Option(None, "--repo", "-r", help="Repository: hexpm or hexpm:<org>."),
) -> None:
    state: CliState = ctx.ensure_object(CliState)
    settings = state.get_settings()
    request = build_request(task, key_name=key_name, permission=permission, all_keys=all_keys)

    try:
        repository = resolve_repo(settings, repo)
        with ExitStack() as stack:
            dispatcher = KeyCommandDispatcher(
                resolve_config=lambda mode: resolve_config(mode, repository, settings),
                client_factory=lambda config: stack.enter_context(HexClient(config)),
                presenter=ConsolePresenter(_console),
            )
            dispatcher.dispatch(request)
    except HexKeyError as exc:
        logger.debug("key %s failed", task, exc_info=exc)
        print_error(_err_console, format_error(exc))
        raise typer.Exit(code=1) from exc
