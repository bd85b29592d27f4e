"""
Tests for environment loading and Settings.
"""

from __future__ import annotations

import pytest

from credit_passport.config import env
from credit_passport.config.settings import Settings, get_settings
from credit_passport.core.exceptions import ConfigurationError


def test_defaults_without_env():
    s = get_settings()
    assert s.gemini_api_key == ""
    assert s.gemini_model == env.DEFAULT_GEMINI_MODEL
    assert s.pinata_api_url == env.DEFAULT_PINATA_API_URL
    assert s.http_timeout_sec == env.DEFAULT_HTTP_TIMEOUT_SEC


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "  abc  ")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-x")
    monkeypatch.setenv("GEMINI_API_BASE", "https://example.test/v1/")
    monkeypatch.setenv("HTTP_TIMEOUT_SEC", "12.5")
    monkeypatch.setenv("PINATA_JWT", "jwt")
    s = get_settings()
    assert s.gemini_api_key == "abc"
    assert s.gemini_model == "gemini-x"
    assert s.gemini_api_base == "https://example.test/v1"
    assert s.http_timeout_sec == 12.5
    assert s.pinata_headers() == {"Authorization": "Bearer jwt"}


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout_falls_back(monkeypatch, raw):
    monkeypatch.setenv("HTTP_TIMEOUT_SEC", raw)
    assert env.get_http_timeout_sec() == env.DEFAULT_HTTP_TIMEOUT_SEC


def test_require_gemini_api_key():
    with pytest.raises(ConfigurationError):
        env.require_gemini_api_key()
    with pytest.raises(ConfigurationError):
        Settings().require_gemini_api_key()
    assert Settings(gemini_api_key="k").require_gemini_api_key() == "k"


def test_pinata_auth_headers():
    assert env.pinata_auth_headers("jwt", "k", "s") == {"Authorization": "Bearer jwt"}
    assert env.pinata_auth_headers("", "k", "s") == {"pinata_api_key": "k", "pinata_secret_api_key": "s"}
    with pytest.raises(ConfigurationError):
        env.pinata_auth_headers("", "k", "")


def test_require_pinata_auth_headers_from_env(monkeypatch):
    with pytest.raises(ConfigurationError):
        env.require_pinata_auth_headers()
    monkeypatch.setenv("PINATA_API_KEY", "k")
    monkeypatch.setenv("PINATA_SECRET_API_KEY", "s")
    assert env.require_pinata_auth_headers()["pinata_api_key"] == "k"


def test_repr_hides_credentials():
    s = Settings(gemini_api_key="secret-key", pinata_jwt="secret-jwt")
    text = repr(s)
    assert "secret-key" not in text
    assert "secret-jwt" not in text
    assert "gemini_api_key=set" in text


def test_startup_line_hides_key(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "secret-key")
    env.print_passport_startup("unit")
    out = capsys.readouterr().out
    assert "gemini_key=set" in out
    assert "secret-key" not in out
