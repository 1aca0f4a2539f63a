"""Contracts for the registry client and the output surface.

Structural (`Protocol`) contracts: `adapters.hex_client.HexClient` and
`cli.ui_components.ConsolePresenter` satisfy them without inheriting, and
tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from core.domain.models import Permission


@runtime_checkable
class KeyRegistryClient(Protocol):
    """Key endpoints of the registry API.

    Calls are blocking and single-shot. Failures raise `core.errors.ApiError`;
    successful calls return the decoded JSON body.
    """

    def key_add(self, name: str | None, permissions: Sequence[Permission]) -> Any: ...

    def key_get(self, name: str) -> Any: ...

    def key_list(self) -> Any: ...

    def key_delete(self, name: str) -> Any: ...

    def key_delete_all(self) -> Any: ...


@runtime_checkable
class Presenter(Protocol):
    """Where command output goes."""

    def say(self, message: str) -> None: ...

    def print_table(self, rows: Sequence[Sequence[str]]) -> None: ...
