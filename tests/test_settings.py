from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcp_paperless.settings import Settings, mask_token


def test_settings_load_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless.local:8000/")
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    monkeypatch.setenv("MCP_AUTH_TOKEN", "k")
    s = Settings()
    assert s.paperless_token == "t"
    assert s.mcp_auth_token == "k"
    assert s.paperless_base_url == "http://paperless.local:8000"


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless.local")
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    for name in ("MCP_AUTH_TOKEN", "LOG_LEVEL", "MCP_TRANSPORT", "MCP_HTTP_PORT", "MCP_HOST"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.mcp_auth_token is None
    assert s.log_level == "info"
    assert s.mcp_transport == "stdio"
    assert s.mcp_http_port == 8080
    assert s.http_timeout_seconds == 30.0


def test_settings_normalise_case_and_empty_token(monkeypatch) -> None:
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless.local")
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    monkeypatch.setenv("MCP_TRANSPORT", "HTTP")
    monkeypatch.setenv("LOG_LEVEL", "Warn")
    monkeypatch.setenv("MCP_AUTH_TOKEN", "  ")
    s = Settings()
    assert s.mcp_transport == "http"
    assert s.log_level == "warn"
    assert s.mcp_auth_token is None


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("MCP_TRANSPORT", "sse"),
        ("LOG_LEVEL", "verbose"),
        ("MCP_HTTP_PORT", "70000"),
        ("PAPERLESS_TOKEN", ""),
    ],
)
def test_settings_reject_invalid_values(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv("PAPERLESS_URL", "http://paperless.local")
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()


def test_settings_require_paperless_url(monkeypatch) -> None:
    monkeypatch.delenv("PAPERLESS_URL", raising=False)
    monkeypatch.setenv("PAPERLESS_TOKEN", "t")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_mask_token() -> None:
    assert mask_token("abcd") == "****"
    assert mask_token("abcdefgh") == "ab****gh"
    assert mask_token(None) == ""
