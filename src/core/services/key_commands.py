"""Dispatch of `hex key <task>` to the registry client.

The CLI turns its arguments into a `CommandRequest`; `KeyCommandDispatcher`
picks the operation, resolves the config in the right mode, calls the client
and sends output to a `Presenter`. Every failure is raised as a `HexKeyError`
on first occurrence; the dispatcher prints nothing on error.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from core.config import RegistryConfig
from core.domain.models import ConfigMode, KeyOperation
from core.errors import (
    ApiError,
    BadCommand,
    MissingRequiredParameter,
    UnsupportedParameters,
)
from core.interfaces.registry import KeyRegistryClient, Presenter
from core.permissions import parse_permissions
from core.services.key_results import key_detail_rows, key_list_rows

logger = logging.getLogger(__name__)

ConfigResolver = Callable[[ConfigMode], RegistryConfig]
ClientFactory = Callable[[RegistryConfig], KeyRegistryClient]


@dataclass
class CommandRequest:
    """One invocation of `hex key`.

    `options` only holds the options the user actually supplied:
    `keyname` (str), `permission` (list of str), `all` (True).
    """

    operation: str
    options: dict[str, Any] = field(default_factory=dict)


_MODES: dict[KeyOperation, ConfigMode] = {
    KeyOperation.GENERATE: ConfigMode.WRITE,
    KeyOperation.FETCH: ConfigMode.READ,
    KeyOperation.LIST: ConfigMode.READ,
    KeyOperation.REVOKE: ConfigMode.WRITE,
}

_ALLOWED: dict[KeyOperation, set[str]] = {
    KeyOperation.GENERATE: {"keyname", "permission"},
    KeyOperation.FETCH: {"keyname"},
    KeyOperation.LIST: set(),
    KeyOperation.REVOKE: {"keyname", "all"},
}


def _supplied(options: dict[str, Any]) -> dict[str, Any]:
    """Drop unset options; a blank key name counts as unset."""

    supplied: dict[str, Any] = {}
    for name, value in options.items():
        if isinstance(value, str):
            value = value.strip()
        if value in (None, False, "", [], ()):
            continue
        supplied[name] = value
    return supplied


@contextmanager
def _tagged(operation: str) -> Iterator[None]:
    try:
        yield
    except ApiError as exc:
        exc.operation = operation
        raise


class KeyCommandDispatcher:
    def __init__(
        self,
        resolve_config: ConfigResolver,
        client_factory: ClientFactory,
        presenter: Presenter,
    ) -> None:
        self._resolve_config = resolve_config
        self._client_factory = client_factory
        self._presenter = presenter
        self.handlers: dict[KeyOperation, Callable[[KeyRegistryClient, dict[str, Any]], None]] = {
            KeyOperation.GENERATE: self._generate,
            KeyOperation.FETCH: self._fetch,
            KeyOperation.LIST: self._list,
            KeyOperation.REVOKE: self._revoke,
        }

    def dispatch(self, request: CommandRequest) -> None:
        try:
            operation = KeyOperation(request.operation)
        except ValueError:
            raise BadCommand(request.operation) from None

        options = _supplied(request.options)
        config = self._resolve_config(_MODES[operation])
        extra = set(options) - _ALLOWED[operation]
        if extra:
            raise UnsupportedParameters(operation.value, list(options))
        logger.debug("Running key %s against %s", operation.value, config.repo_name)
        client = self._client_factory(config)
        self.handlers[operation](client, options)

    def _generate(self, client: KeyRegistryClient, options: dict[str, Any]) -> None:
        permissions = parse_permissions(options.get("permission"))
        with _tagged("generate"):
            client.key_add(options.get("keyname"), permissions)
        self._presenter.say("Key successfully created")

    def _fetch(self, client: KeyRegistryClient, options: dict[str, Any]) -> None:
        if "keyname" not in options:
            raise MissingRequiredParameter("fetch", "keyname")
        with _tagged("fetch"):
            payload = client.key_get(options["keyname"])
        self._presenter.print_table(key_detail_rows(payload))

    def _list(self, client: KeyRegistryClient, options: dict[str, Any]) -> None:
        with _tagged("list"):
            payload = client.key_list()
        self._presenter.print_table(key_list_rows(payload))

    def _revoke(self, client: KeyRegistryClient, options: dict[str, Any]) -> None:
        if options == {"all": True}:
            with _tagged("revoke_all"):
                client.key_delete_all()
            self._presenter.say("All keys successfully revoked")
        elif set(options) == {"keyname"}:
            with _tagged("revoke"):
                client.key_delete(options["keyname"])
            self._presenter.say("Key successfully revoked")
        else:
            raise UnsupportedParameters("revoke", list(options))
