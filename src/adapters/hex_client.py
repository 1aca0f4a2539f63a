"""Registry client for the `/keys` endpoints of the hex.pm API.

Implements `core.interfaces.registry.KeyRegistryClient`. Each method performs
exactly one request; HTTP failures are mapped to `ApiError` kinds and never
retried here.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from adapters.http_client import build_client
from core.config import RegistryConfig
from core.domain.models import Permission
from core.errors import ApiError, ApiErrorKind, MalformedResult

logger = logging.getLogger(__name__)

_MAX_MESSAGE_LENGTH = 200

_STATUS_KINDS: dict[int, ApiErrorKind] = {
    401: ApiErrorKind.UNAUTHORIZED,
    403: ApiErrorKind.UNAUTHORIZED,
    404: ApiErrorKind.NOT_FOUND,
    422: ApiErrorKind.VALIDATION_ERRORS,
}


class HexClient:
    """Synchronous client for API key management.

    Usable as a context manager; the underlying `httpx.Client` is closed on
    exit only when this instance created it.
    """

    def __init__(self, config: RegistryConfig, *, http: httpx.Client | None = None) -> None:
        self._config = config
        self._owns_http = http is None
        self._http = http or build_client(config)

    def __enter__(self) -> "HexClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def _keys_path(self) -> str:
        if self._config.api_organization:
            return f"/orgs/{quote(self._config.api_organization, safe='')}/keys"
        return "/keys"

    def _key_path(self, name: str) -> str:
        if not name or not name.strip():
            raise ValueError("key name must not be empty")
        return f"{self._keys_path}/{quote(name, safe='')}"

    def key_add(self, name: str | None, permissions: Sequence[Permission]) -> Any:
        body: dict[str, Any] = {
            "name": name,
            "permissions": [p.model_dump() for p in permissions],
        }
        return self._request("POST", self._keys_path, json=body)

    def key_get(self, name: str) -> Any:
        return self._request("GET", self._key_path(name))

    def key_list(self) -> Any:
        return self._request("GET", self._keys_path)

    def key_delete(self, name: str) -> Any:
        return self._request("DELETE", self._key_path(name))

    def key_delete_all(self) -> Any:
        return self._request("DELETE", self._keys_path)

    def ping(self) -> int:
        """Return the HTTP status of the API root (used by `hex doctor`)."""

        try:
            response = self._http.get("/")
        except httpx.HTTPError as exc:
            raise ApiError(ApiErrorKind.GENERIC, message=str(exc)) from exc
        return response.status_code

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise ApiError(ApiErrorKind.GENERIC, message=f"Request failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise MalformedResult(f"Registry returned a non-JSON body for {method} {path}") from exc

        payload = _decode_error_body(response)
        kind = _STATUS_KINDS.get(response.status_code, ApiErrorKind.GENERIC)
        message = None if isinstance(payload, dict) else _text_message(response)
        raise ApiError(kind, status_code=response.status_code, payload=payload, message=message)


def _text_message(response: httpx.Response) -> str | None:
    """First line of a plain-text error body; HTML pages and empty bodies give None."""

    text = response.text.strip()
    if not text or text.startswith("<"):
        return None
    line = text.splitlines()[0]
    if len(line) > _MAX_MESSAGE_LENGTH:
        line = line[: _MAX_MESSAGE_LENGTH - 3] + "..."
    return line


def _decode_error_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
