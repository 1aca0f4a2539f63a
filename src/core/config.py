"""Core configuration.

- `AppSettings` centralizes environment variables (pydantic-settings) so the
  CLI and the registry client read them the same way.
- `resolve_repo` / `resolve_config` turn settings into the per-invocation
  `RegistryConfig` a command runs with.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import ConfigMode
from core.errors import ConfigResolutionError

logger = logging.getLogger(__name__)

DEFAULT_REPO = "hexpm"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "hex-keys"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "hex-keys"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "hex-keys"
    return Path.home() / ".config" / "hex-keys"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# hex-keys user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings, read from `HEX_*` environment variables.

    Lookup order: process environment, project `.env`, then the user's
    global `.env` (written by `hex doctor setup`).
    """

    model_config = SettingsConfigDict(
        env_prefix="HEX_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_url: str = Field(
        default="https://hex.pm/api",
        min_length=8,
        description="Base URL of the registry HTTP API.",
    )
    api_key: str | None = Field(
        default=None,
        description="Key used for both read and write calls when no dedicated key is set.",
    )
    read_key: str | None = Field(
        default=None,
        description="Key used for read-only calls (fetch, list).",
    )
    write_key: str | None = Field(
        default=None,
        description="Key used for write calls (generate, revoke).",
    )
    default_repo: str = Field(
        default=DEFAULT_REPO,
        min_length=1,
        description="Repository used when --repo is not given.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="hex-keys/0.1 (python)",
        min_length=1,
        description="User-Agent sent to the registry.",
    )


class Repository(BaseModel):
    """A repository selected with `--repo` (`hexpm` or `hexpm:<org>`)."""

    model_config = ConfigDict(frozen=True)

    name: str
    organization: str | None = None


class RegistryConfig(BaseModel):
    """Everything the registry client needs for one invocation."""

    model_config = ConfigDict(frozen=True)

    repo_name: str
    api_url: str
    api_key: str = Field(..., repr=False)
    api_organization: str | None = None
    http_timeout_seconds: float = 20.0
    user_agent: str = "hex-keys/0.1 (python)"


def resolve_repo(settings: AppSettings, name: str | None = None) -> Repository:
    name = (name or settings.default_repo).strip()
    if name == DEFAULT_REPO:
        return Repository(name=name)

    parent, sep, org = name.partition(":")
    if parent == DEFAULT_REPO and sep and org and ":" not in org:
        return Repository(name=name, organization=org)

    raise ConfigResolutionError(f"No configuration for repository {name} found")


def resolve_config(mode: ConfigMode, repo: Repository, settings: AppSettings) -> RegistryConfig:
    """Build the config for `repo` with the key matching `mode`.

    Write mode only accepts `write_key`/`api_key`; read mode also falls back
    to the write key.
    """

    if mode is ConfigMode.WRITE:
        key = settings.write_key or settings.api_key
    else:
        key = settings.read_key or settings.api_key or settings.write_key

    if not key:
        raise ConfigResolutionError(
            f"No {mode.value} key found for repository {repo.name}. "
            "Set HEX_API_KEY or run `hex doctor setup`."
        )

    logger.debug("Resolved %s config for repository %s", mode.value, repo.name)
    return RegistryConfig(
        repo_name=repo.name,
        api_url=settings.api_url.rstrip("/"),
        api_key=key,
        api_organization=repo.organization,
        http_timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
    )
