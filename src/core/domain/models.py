"""Domain models (Pydantic v2).

Notes:
- These models describe *what* the registry hands back, not *how* it is fetched.
- Key records are validated at the edge: a payload that does not match raises
  `MalformedResult` instead of rendering partial rows.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.errors import MalformedResult


class KeyOperation(str, Enum):
    """Operations supported by `hex key`."""

    GENERATE = "generate"
    FETCH = "fetch"
    LIST = "list"
    REVOKE = "revoke"

    @classmethod
    def names(cls) -> list[str]:
        return sorted(op.value for op in cls)


class ConfigMode(str, Enum):
    """Credential mode an operation needs."""

    READ = "read"
    WRITE = "write"


class Permission(BaseModel):
    """A single `domain:resource` grant attached to a key."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(
        ...,
        min_length=1,
        description="Permission domain (e.g. 'api', 'repository').",
    )
    resource: str = Field(
        ...,
        min_length=1,
        description="Resource inside the domain (e.g. 'read', 'write', a repo name).",
    )


class KeyLastUse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    ip: str = Field(..., description="Address the key was last used from.")
    used_at: str = Field(..., description="Timestamp of the last use.")
    user_agent: str = Field(..., description="User-Agent of the last request.")


class KeyListEntry(BaseModel):
    """The subset of a key record the list table needs."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., description="Key name.")
    inserted_at: str = Field(..., description="Creation timestamp.")


class KeyRecord(KeyListEntry):
    """A key as returned by `GET /keys/{name}`."""

    updated_at: str = Field(..., description="Last update timestamp.")
    last_use: KeyLastUse = Field(..., description="Details of the last request made with the key.")


def parse_key_record(payload: Any) -> KeyRecord:
    try:
        return KeyRecord.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResult(f"Unexpected key record from registry: {_summarize(exc)}") from exc


def parse_key_list(payload: Any) -> list[KeyListEntry]:
    if not isinstance(payload, list):
        raise MalformedResult(f"Expected a list of keys, got {type(payload).__name__}")
    try:
        return [KeyListEntry.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise MalformedResult(f"Unexpected key list from registry: {_summarize(exc)}") from exc


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc} ({err.get('msg', 'invalid')})")
    return ", ".join(parts)
