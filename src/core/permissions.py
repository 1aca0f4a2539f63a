"""Parsing of `--permission DOMAIN:RESOURCE` values."""

from __future__ import annotations

from typing import Iterable

from core.domain.models import Permission
from core.errors import InvalidPermissionFormat


def parse_permission(token: str) -> Permission:
    parts = token.split(":")
    if len(parts) != 2:
        raise InvalidPermissionFormat(token)
    domain, resource = (p.strip() for p in parts)
    if not domain or not resource:
        raise InvalidPermissionFormat(token)
    return Permission(domain=domain, resource=resource)


def parse_permissions(tokens: Iterable[str] | None) -> list[Permission]:
    """Parse every token, keeping the order they were given on the command line."""

    return [parse_permission(token) for token in tokens or ()]
