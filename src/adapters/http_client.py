"""httpx wrapper.

Standardizes timeouts, headers and authentication for every call to the
registry.
"""

from __future__ import annotations

import httpx

from core.config import RegistryConfig


def build_client(config: RegistryConfig) -> httpx.Client:
    """Create an `httpx.Client` bound to the registry API of `config`."""

    headers: dict[str, str] = {
        "User-Agent": config.user_agent,
        "Accept": "application/json",
        "Authorization": config.api_key,
    }
    return httpx.Client(
        base_url=config.api_url,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )
