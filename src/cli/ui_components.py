"""CLI UI components (Rich).

Keeps command logic apart from visual details; every command prints tables
and messages through the same helpers.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text


def build_table(rows: Sequence[Sequence[str]]) -> Table:
    """Build a Rich table; the first row is the header."""

    table = Table()
    if not rows:
        return table
    header, *body = rows
    for i, column in enumerate(header):
        table.add_column(str(column), style="cyan" if i == 0 else "white", no_wrap=i == 0)
    for row in body:
        table.add_row(*(Text(str(cell)) for cell in row))
    return table


def print_table(console: Console, rows: Sequence[Sequence[str]]) -> None:
    console.print(build_table(rows))


def print_error(console: Console, message: str) -> None:
    console.print(message, style="red", highlight=False, markup=False, emoji=False)


class ConsolePresenter:
    """`core.interfaces.registry.Presenter` backed by a Rich console."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def say(self, message: str) -> None:
        self._console.print(message, highlight=False)

    def print_table(self, rows: Sequence[Sequence[str]]) -> None:
        print_table(self._console, rows)
