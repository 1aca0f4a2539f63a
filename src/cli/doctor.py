"""Doctor command for configuration diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.hex_client import HexClient
from cli.state import CliState
from core.config import AppSettings, resolve_config, resolve_repo, write_user_env_vars
from core.domain.models import ConfigMode
from core.errors import HexKeyError

app = typer.Typer(no_args_is_help=True, help="Configuration checks and setup.")

_console = Console()


def _check_mode(settings: AppSettings, mode: ConfigMode) -> tuple[bool, str]:
    try:
        resolve_config(mode, resolve_repo(settings), settings)
    except HexKeyError as exc:
        return False, str(exc)
    return True, "Key configured"


def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        config = resolve_config(ConfigMode.READ, resolve_repo(settings), settings)
        with HexClient(config) as client:
            status = client.ping()
    except HexKeyError as exc:
        return False, str(exc)
    return status < 500, f"HTTP {status}"


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show what is missing."""

    settings = ctx.ensure_object(CliState).get_settings()

    table = Table(title="hex-keys Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API URL", "OK", settings.api_url)
    table.add_row("Repository", "OK", settings.default_repo)

    ok_read, detail_read = _check_mode(settings, ConfigMode.READ)
    table.add_row("Read key", "OK" if ok_read else "MISSING", detail_read)
    ok_write, detail_write = _check_mode(settings, ConfigMode.WRITE)
    table.add_row("Write key", "OK" if ok_write else "MISSING", detail_write)

    # Connectivity (best-effort)
    ok_api, detail_api = _check_api(settings) if ok_read else (False, "Skipped: no read key")
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_write:
        _console.print("\n[yellow]Note:[/yellow] `hex key generate` and `hex key revoke` need a write key.")


@app.command()
def setup() -> None:
    """Interactive setup (stores keys in the user config .env)."""

    api_url = typer.prompt("API URL", default="https://hex.pm/api", show_default=True).strip()
    read_key = typer.prompt("Read key (empty to skip)", default="", show_default=False, hide_input=True).strip()
    write_key = typer.prompt("Write key (empty to skip)", default="", show_default=False, hide_input=True).strip()

    if not api_url:
        raise typer.BadParameter("API URL is required")
    if not read_key and not write_key:
        raise typer.BadParameter("at least one of read key or write key is required")

    env_path = write_user_env_vars(
        {
            "HEX_API_URL": api_url,
            "HEX_READ_KEY": read_key or None,
            "HEX_WRITE_KEY": write_key or None,
        }
    )

    _console.print(f"[green]Saved configuration to:[/green] {env_path}")
