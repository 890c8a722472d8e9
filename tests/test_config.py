"""Tests for environment-driven settings."""

import pytest

from resend_uvx_mcp.config import DEFAULT_PORT, DEFAULT_RESEND_API_URL, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MCP_TRANSPORT", "MCP_HOST", "MCP_PORT", "RESEND_API_URL", "RESEND_TIMEOUT", "RESEND_MCP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env()
        assert settings.transport == "stdio"
        assert settings.port == DEFAULT_PORT
        assert settings.resend_api_url == DEFAULT_RESEND_API_URL
        assert settings.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("MCP_TRANSPORT", "HTTP")
        monkeypatch.setenv("MCP_PORT", "8080")
        monkeypatch.setenv("RESEND_TIMEOUT", "2.5")
        monkeypatch.setenv("RESEND_MCP_LOG_LEVEL", "debug")

        settings = Settings.from_env()
        assert settings.transport == "http"
        assert settings.port == 8080
        assert settings.timeout == 2.5
        assert settings.log_level == "DEBUG"

    def test_bad_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("MCP_PORT", "eighty")
        monkeypatch.setenv("RESEND_TIMEOUT", "soon")

        settings = Settings.from_env()
        assert settings.port == DEFAULT_PORT
        assert settings.timeout == 30.0

    def test_unknown_transport(self, monkeypatch):
        monkeypatch.setenv("MCP_TRANSPORT", "carrier-pigeon")
        with pytest.raises(RuntimeError):
            Settings.from_env()
