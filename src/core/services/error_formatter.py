"""Human-readable messages for `HexKeyError`s.

The CLI prints whatever `format_error` returns and exits non-zero. Known
(operation, kind) pairs get a dedicated message; everything else goes through
`format_generic_error`.
"""

from __future__ import annotations

from typing import Any

from core.domain.models import KeyOperation
from core.errors import ApiError, ApiErrorKind, BadCommand, HexKeyError


def format_error(error: HexKeyError) -> str:
    if isinstance(error, BadCommand):
        names = KeyOperation.names()
        return f"Unknown command. Command must be {', '.join(names[:-1])}, or {names[-1]}"

    if isinstance(error, ApiError):
        op, kind = error.operation, error.kind
        if op == "list" and kind is ApiErrorKind.UNAUTHORIZED:
            return "Error while attempting to perform list : Not authorized"
        if op == "list" and kind is ApiErrorKind.GENERIC and error.message:
            return f"Error while attempting to perform list : {error.message}"
        if op == "revoke" and kind is ApiErrorKind.NOT_FOUND:
            return "Error while revoking key : key not found"
        if op == "generate" and kind is ApiErrorKind.VALIDATION_ERRORS:
            message = error.message or "Validation failed"
            return f"{message}\n\t{errors_to_string(error.errors)}"

    return format_generic_error(error)


def format_generic_error(error: HexKeyError) -> str:
    if not isinstance(error, ApiError):
        return str(error)

    if error.kind is ApiErrorKind.UNAUTHORIZED:
        reason = "Not authorized"
    elif error.kind is ApiErrorKind.NOT_FOUND:
        reason = "Not found"
    elif error.kind is ApiErrorKind.VALIDATION_ERRORS and error.errors:
        reason = f"{error.message or 'Validation failed'}\n\t{errors_to_string(error.errors)}"
    elif error.message:
        reason = error.message
    elif error.status_code is not None:
        reason = f"HTTP {error.status_code}"
    else:
        reason = error.kind.value
    return f"Failed to {error.operation or 'call registry'} : {reason}"


def errors_to_string(errors: Any) -> str:
    """Flatten an API `errors` map into `field: message` lines joined by `\\n\\t`."""

    return "\n\t".join(_error_lines(errors, prefix=""))


def _error_lines(value: Any, prefix: str) -> list[str]:
    if isinstance(value, dict):
        lines: list[str] = []
        for key in sorted(value, key=str):
            child = f"{prefix}.{key}" if prefix else str(key)
            lines.extend(_error_lines(value[key], child))
        return lines
    if isinstance(value, (list, tuple)):
        if all(not isinstance(v, (dict, list, tuple)) for v in value):
            text = ", ".join(str(v) for v in value)
            return [f"{prefix}: {text}" if prefix else text]
        lines = []
        for item in value:
            lines.extend(_error_lines(item, prefix))
        return lines
    return [f"{prefix}: {value}" if prefix else str(value)]
