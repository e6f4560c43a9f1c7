"""AppSettings, `is_truthy` y el .env de usuario."""

from __future__ import annotations

import pytest

from core.config import AppSettings, _parse_env_lines, is_truthy, write_user_env_vars


@pytest.mark.parametrize("value", ["1", "t", "true", "TRUE", "y", "yes", "on", "  On  "])
def test_truthy_values(value):
    assert is_truthy(value)


@pytest.mark.parametrize("value", [None, "", "0", "false", "no", "off", "2", "enabled"])
def test_falsy_values(value):
    assert not is_truthy(value)


def test_settings_render_binding_properties(monkeypatch):
    monkeypatch.setenv("HTTP_BINDING_URL", "https://upstream.test")
    monkeypatch.setenv("HTTP_BINDING_MTLS_ROOT_CA", "/etc/ca.pem")
    monkeypatch.setenv("HTTP_BINDING_ERROR_IF_NOT_2XX", "false")

    props = AppSettings(_env_file=None).to_properties()

    assert props == {
        "url": "https://upstream.test",
        "mtlsRootCA": "/etc/ca.pem",
        "errorIfNot2XX": "false",
    }


def test_settings_omit_unset_values(monkeypatch):
    for name in ("URL", "MTLS_CLIENT_CERT", "MTLS_CLIENT_KEY", "MTLS_ROOT_CA", "ERROR_IF_NOT_2XX"):
        monkeypatch.delenv(f"HTTP_BINDING_{name}", raising=False)

    assert AppSettings(_env_file=None).to_properties() == {}


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"HTTP_BINDING_URL": "https://a.test"}, env_path)
    write_user_env_vars({"HTTP_BINDING_MTLS_ROOT_CA": "/ca.pem"}, env_path)

    data = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    assert data == {"HTTP_BINDING_URL": "https://a.test", "HTTP_BINDING_MTLS_ROOT_CA": "/ca.pem"}
