from __future__ import annotations

import json
import logging

import httpx
import respx
from typer.testing import CliRunner

from cli.main import app, configure_logging
from cli.state import CliState
from core import config as config_module
from core.config import AppSettings
from fakes import API_URL, key_record

runner = CliRunner()


def invoke(args, settings: AppSettings):
    return runner.invoke(app, args, obj=CliState(settings=settings))


@respx.mock
def test_generate_end_to_end(settings):
    route = respx.post(f"{API_URL}/keys").mock(return_value=httpx.Response(201, json=key_record("tok1")))

    result = invoke(["key", "generate", "-k", "tok1", "-p", "api:read"], settings)

    assert result.exit_code == 0, result.output
    assert "Key successfully created" in result.output
    body = json.loads(route.calls.last.request.content)
    assert body == {"name": "tok1", "permissions": [{"domain": "api", "resource": "read"}]}


@respx.mock
def test_generate_with_repeated_permissions(settings):
    route = respx.post(f"{API_URL}/keys").mock(return_value=httpx.Response(201, json=key_record()))

    result = invoke(
        ["key", "generate", "--key-name", "ci", "--permission", "api:read", "--permission", "repository:acme"],
        settings,
    )

    assert result.exit_code == 0, result.output
    perms = json.loads(route.calls.last.request.content)["permissions"]
    assert perms == [
        {"domain": "api", "resource": "read"},
        {"domain": "repository", "resource": "acme"},
    ]


@respx.mock
def test_generate_validation_errors_are_listed(settings):
    respx.post(f"{API_URL}/keys").mock(
        return_value=httpx.Response(
            422,
            json={"message": "Validation error(s)", "errors": {"name": "has already been taken"}},
        )
    )

    result = invoke(["key", "generate", "-k", "dup"], settings)

    assert result.exit_code == 1
    assert "Validation error(s)" in result.output
    assert "name: has already been taken" in result.output


def test_generate_with_malformed_permission(settings):
    result = invoke(["key", "generate", "-p", "api"], settings)

    assert result.exit_code == 1
    assert "Invalid permission" in result.output


@respx.mock
def test_list_renders_table(settings):
    respx.get(f"{API_URL}/keys").mock(
        return_value=httpx.Response(200, json=[key_record("alpha"), key_record("beta")])
    )

    result = invoke(["key", "list"], settings)

    assert result.exit_code == 0, result.output
    assert "Name" in result.output
    assert "Created" in result.output
    assert "alpha" in result.output
    assert "beta" in result.output


@respx.mock
def test_list_unauthorized(settings):
    respx.get(f"{API_URL}/keys").mock(return_value=httpx.Response(401, json={"message": "invalid key"}))

    result = invoke(["key", "list"], settings)

    assert result.exit_code == 1
    assert "Error while attempting to perform list : Not authorized" in result.output


@respx.mock
def test_fetch_renders_detail(settings):
    record = {
        "name": "ci",
        "inserted_at": "2024-01-02",
        "updated_at": "2024-01-03",
        "last_use": {"ip": "10.0.0.1", "used_at": "2024-01-04", "user_agent": "mix"},
    }
    respx.get(f"{API_URL}/keys/ci").mock(return_value=httpx.Response(200, json=record))

    result = invoke(["key", "fetch", "-k", "ci"], settings)

    assert result.exit_code == 0, result.output
    for value in ("LastUsedBy", "2024-01-03", "2024-01-04", "10.0.0.1"):
        assert value in result.output


def test_fetch_without_key_name(settings):
    result = invoke(["key", "fetch"], settings)

    assert result.exit_code == 1
    assert "Missing required parameter for fetch" in result.output


@respx.mock
def test_revoke_not_found(settings):
    respx.delete(f"{API_URL}/keys/ghost").mock(return_value=httpx.Response(404, json={"message": "not found"}))

    result = invoke(["key", "revoke", "-k", "ghost"], settings)

    assert result.exit_code == 1
    assert "Error while revoking key : key not found" in result.output


@respx.mock
def test_revoke_all(settings):
    route = respx.delete(f"{API_URL}/keys").mock(return_value=httpx.Response(204))

    result = invoke(["key", "revoke", "--all"], settings)

    assert result.exit_code == 0, result.output
    assert route.called
    assert "All keys successfully revoked" in result.output


def test_revoke_with_all_and_key_name_is_rejected(settings):
    result = invoke(["key", "revoke", "-a", "-k", "ci"], settings)

    assert result.exit_code == 1
    assert "Unsupported parameters for revoke" in result.output


def test_unknown_task(settings):
    result = invoke(["key", "frobnicate"], settings)

    assert result.exit_code == 1
    assert "Unknown command. Command must be fetch, generate, list, or revoke" in result.output


@respx.mock
def test_write_command_without_write_key_makes_no_request():
    settings = AppSettings(_env_file=None, api_url=API_URL, read_key="reader")

    result = invoke(["key", "revoke", "-k", "ci"], settings)

    assert result.exit_code == 1
    assert "No write key found" in result.output
    assert len(respx.calls) == 0


def test_unknown_repository(settings):
    result = invoke(["key", "list", "--repo", "private"], settings)

    assert result.exit_code == 1
    assert "No configuration for repository private found" in result.output


@respx.mock
def test_organization_repository(settings):
    route = respx.get(f"{API_URL}/orgs/acme/keys").mock(return_value=httpx.Response(200, json=[]))

    result = invoke(["key", "list", "-r", "hexpm:acme"], settings)

    assert result.exit_code == 0, result.output
    assert route.called


def test_key_help_documents_fetch(settings):
    result = invoke(["key", "--help"], settings)

    assert result.exit_code == 0
    assert "hex key fetch" in result.output


def test_doctor_reports_missing_keys():
    settings = AppSettings(_env_file=None, api_url=API_URL)

    result = invoke(["doctor", "run"], settings)

    assert result.exit_code == 0, result.output
    assert "MISSING" in result.output
    assert "Skipped" in result.output


@respx.mock
def test_revoke_with_empty_key_name_revokes_nothing(settings):
    route = respx.delete(url__startswith=API_URL).mock(return_value=httpx.Response(204))

    result = invoke(["key", "revoke", "-k", ""], settings)

    assert result.exit_code == 1
    assert "Unsupported parameters for revoke" in result.output
    assert "successfully" not in result.output
    assert not route.called


@respx.mock
def test_fetch_with_empty_key_name_is_missing_parameter(settings):
    route = respx.get(url__startswith=API_URL).mock(return_value=httpx.Response(200, json=[]))

    result = invoke(["key", "fetch", "-k", ""], settings)

    assert result.exit_code == 1
    assert "Missing required parameter for fetch" in result.output
    assert not route.called


def test_list_rejects_key_name(settings):
    result = invoke(["key", "list", "-k", "ci"], settings)

    assert result.exit_code == 1
    assert "Unsupported parameters for list" in result.output


@respx.mock
def test_verbose_logs_requests_without_api_key(settings):
    respx.get(f"{API_URL}/keys").mock(return_value=httpx.Response(200, json=[key_record("alpha")]))

    result = invoke(["--verbose", "key", "list"], settings)

    assert result.exit_code == 0, result.output
    assert logging.getLogger().level == logging.DEBUG
    assert "GET /keys" in result.output
    assert "secret-key" not in result.output
    configure_logging(False)


def test_default_log_level_is_warning(settings):
    result = invoke(["key", "frobnicate"], settings)

    assert result.exit_code == 1
    assert logging.getLogger().level == logging.WARNING


def test_doctor_setup_writes_user_env_file(tmp_path, monkeypatch):
    env_path = tmp_path / "hex-keys" / ".env"
    monkeypatch.setattr(config_module, "get_user_env_file", lambda: env_path)

    result = runner.invoke(app, ["doctor", "setup"], input="https://hex.test/api\nreader\nwriter\n")

    assert result.exit_code == 0, result.output
    text = env_path.read_text(encoding="utf-8")
    assert "HEX_API_URL=https://hex.test/api" in text
    assert "HEX_READ_KEY=reader" in text
    assert "HEX_WRITE_KEY=writer" in text


def test_doctor_setup_skips_blank_key(tmp_path, monkeypatch):
    env_path = tmp_path / "hex-keys" / ".env"
    monkeypatch.setattr(config_module, "get_user_env_file", lambda: env_path)

    result = runner.invoke(app, ["doctor", "setup"], input="\n\nwriter\n")

    assert result.exit_code == 0, result.output
    text = env_path.read_text(encoding="utf-8")
    assert "HEX_API_URL=https://hex.pm/api" in text
    assert "HEX_WRITE_KEY=writer" in text
    assert "HEX_READ_KEY" not in text


def test_doctor_setup_requires_a_key(tmp_path, monkeypatch):
    env_path = tmp_path / "hex-keys" / ".env"
    monkeypatch.setattr(config_module, "get_user_env_file", lambda: env_path)

    result = runner.invoke(app, ["doctor", "setup"], input="https://hex.test/api\n\n\n")

    assert result.exit_code != 0
    assert not env_path.exists()
