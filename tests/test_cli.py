"""CLI (Typer) sin red: comandos que no necesitan un endpoint real."""

from __future__ import annotations

import sys

import pytest
from typer.testing import CliRunner

from cli import doctor
from cli.main import _parse_metadata, app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in ("URL", "MTLS_CLIENT_CERT", "MTLS_CLIENT_KEY", "MTLS_ROOT_CA", "ERROR_IF_NOT_2XX"):
        monkeypatch.delenv(f"HTTP_BINDING_{name}", raising=False)


def test_operations_command_lists_tokens():
    result = runner.invoke(app, ["operations"])

    assert result.exit_code == 0
    for token in ("create", "get", "trace"):
        assert token in result.output


def test_invoke_without_url_fails():
    result = runner.invoke(app, ["invoke", "get"])

    assert result.exit_code != 0


def test_invoke_rejects_invalid_operation_before_network():
    result = runner.invoke(app, ["invoke", "connect", "--url", "http://127.0.0.1:9"])

    assert result.exit_code == 1
    assert "invalid operation" in result.output


def test_invoke_rejects_path_traversal_before_network():
    result = runner.invoke(app, ["invoke", "get", "--url", "http://127.0.0.1:9", "--path", "../x"])

    assert result.exit_code == 1
    assert "invalid path" in result.output


def test_parse_metadata():
    assert _parse_metadata(["Authorization=Bearer a=b", "path=/x"]) == {
        "Authorization": "Bearer a=b",
        "path": "/x",
    }


def test_doctor_reports_missing_url():
    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "HTTP_BINDING_URL" in result.output


def test_doctor_reports_mtls(monkeypatch, client_cert_path, client_key_path, root_ca_path):
    monkeypatch.setenv("HTTP_BINDING_URL", "https://upstream.test")
    monkeypatch.setenv("HTTP_BINDING_MTLS_CLIENT_CERT", str(client_cert_path))
    monkeypatch.setenv("HTTP_BINDING_MTLS_CLIENT_KEY", str(client_key_path))
    monkeypatch.setenv("HTTP_BINDING_MTLS_ROOT_CA", str(root_ca_path))

    ok, detail, mtls = doctor._check_init(doctor.AppSettings(_env_file=None))

    assert ok, detail
    assert mtls


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG config dir only on Linux")
def test_doctor_configure_writes_user_env(tmp_path):
    result = runner.invoke(app, ["doctor", "configure"], input="https://a.test\n\n\n\n")

    assert result.exit_code == 0, result.output
    env_file = tmp_path / "xdg" / "http-binding" / ".env"
    lines = env_file.read_text(encoding="utf-8").splitlines()
    assert "HTTP_BINDING_URL=https://a.test" in lines
    assert not any(line.startswith("HTTP_BINDING_MTLS_") for line in lines)
