"""Error taxonomy for the `key` command.

Every failure a command can hit is a `HexKeyError`. The core raises them and
never prints; only the CLI layer turns them into a message and an exit code
(see `core.services.error_formatter`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class HexKeyError(Exception):
    """Base class for every user-facing failure of a key command."""


class ConfigResolutionError(HexKeyError):
    """Repository or credentials could not be resolved."""


class InvalidPermissionFormat(HexKeyError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Invalid permission {token!r}: expected DOMAIN:RESOURCE (e.g. api:read)")
        self.token = token


class MissingRequiredParameter(HexKeyError):
    def __init__(self, operation: str, parameter: str) -> None:
        super().__init__(f"Missing required parameter for {operation}: {parameter}")
        self.operation = operation
        self.parameter = parameter


class UnsupportedParameters(HexKeyError):
    def __init__(self, operation: str, given: list[str] | None = None) -> None:
        names = ", ".join(sorted(given or [])) or "none"
        super().__init__(f"Unsupported parameters for {operation} (got: {names})")
        self.operation = operation
        self.given = sorted(given or [])


class BadCommand(HexKeyError):
    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command {command!r}")
        self.command = command


class MalformedResult(HexKeyError):
    """The registry answered with a payload that does not have the expected shape."""


class ApiErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION_ERRORS = "validation_errors"
    GENERIC = "generic"


class ApiError(HexKeyError):
    """Failed registry API call.

    `operation` is filled in by the dispatcher with the command that made the
    call (`generate`, `fetch`, `list`, `revoke` or `revoke_all`).
    """

    def __init__(
        self,
        kind: ApiErrorKind,
        *,
        status_code: int | None = None,
        payload: Any = None,
        message: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.kind = kind
        self.status_code = status_code
        self.payload = payload
        self.operation = operation
        if message is None and isinstance(payload, dict) and isinstance(payload.get("message"), str):
            message = payload["message"]
        self.message = message
        super().__init__(message or kind.value)

    @property
    def errors(self) -> Any:
        if isinstance(self.payload, dict):
            return self.payload.get("errors") or {}
        return {}
