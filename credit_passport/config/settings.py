"""
Application settings.

Responsibilities:
- Collect configuration from environment variables and the .env file.
- Provide defaults for optional settings.
- Expose a typed, immutable settings object for the extraction adapter,
  content storage client and API server.

Missing credentials are not an error here; they are checked by the component
that needs them (see Settings.require_gemini_api_key).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from credit_passport.config import env
from credit_passport.core.exceptions import ConfigurationError


def _port_from_env() -> int:
    raw = (os.getenv("API_PORT") or "8000").strip()
    try:
        return int(raw)
    except ValueError:
        return 8000


@dataclass(frozen=True)
class Settings:
    """Runtime configuration. Built from env by get_settings(); tests construct it directly."""

    gemini_api_key: str = ""
    gemini_model: str = env.DEFAULT_GEMINI_MODEL
    gemini_api_base: str = env.DEFAULT_GEMINI_API_BASE
    pinata_jwt: str = field(default="", repr=False)
    pinata_api_key: str = field(default="", repr=False)
    pinata_secret_api_key: str = field(default="", repr=False)
    pinata_api_url: str = env.DEFAULT_PINATA_API_URL
    http_timeout_sec: float = env.DEFAULT_HTTP_TIMEOUT_SEC
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    def __repr__(self) -> str:
        key_state = "set" if self.gemini_api_key else "missing"
        return (
            f"Settings(gemini_model={self.gemini_model!r}, gemini_api_key={key_state}, "
            f"pinata_api_url={self.pinata_api_url!r}, http_timeout_sec={self.http_timeout_sec})"
        )

    def require_gemini_api_key(self) -> str:
        if not self.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        return self.gemini_api_key

    def pinata_headers(self) -> dict[str, str]:
        return env.pinata_auth_headers(self.pinata_jwt, self.pinata_api_key, self.pinata_secret_api_key)


def get_settings() -> Settings:
    """Return settings read from the current environment (and .env)."""
    env.load_passport_env()
    return Settings(
        gemini_api_key=env.get_gemini_api_key(),
        gemini_model=env.get_gemini_model(),
        gemini_api_base=env.get_gemini_api_base(),
        pinata_jwt=(os.getenv("PINATA_JWT") or "").strip(),
        pinata_api_key=(os.getenv("PINATA_API_KEY") or "").strip(),
        pinata_secret_api_key=(os.getenv("PINATA_SECRET_API_KEY") or "").strip(),
        pinata_api_url=env.get_pinata_api_url(),
        http_timeout_sec=env.get_http_timeout_sec(),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=_port_from_env(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
