from __future__ import annotations

import pytest

from core.config import AppSettings, RegistryConfig
from fakes import API_URL


@pytest.fixture(autouse=True)
def clean_hex_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HEX_API_URL", "HEX_API_KEY", "HEX_READ_KEY", "HEX_WRITE_KEY", "HEX_DEFAULT_REPO"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(_env_file=None, api_url=API_URL, api_key="secret-key")


@pytest.fixture()
def registry_config() -> RegistryConfig:
    return RegistryConfig(repo_name="hexpm", api_url=API_URL, api_key="secret-key")
