"""
Environment variable loading for Credit Passport.

- GEMINI_API_KEY: credential for the extraction endpoint (required for extraction)
- GEMINI_MODEL: model name (default: gemini-3-flash-preview)
- GEMINI_API_BASE: Generative Language API base URL
- PINATA_JWT, or PINATA_API_KEY + PINATA_SECRET_API_KEY: content storage credentials
- PINATA_API_URL: pinJSONToIPFS endpoint
- HTTP_TIMEOUT_SEC: transport timeout for both collaborators (default: 60)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from credit_passport.core.exceptions import ConfigurationError

# Project root: config is credit_passport/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_PINATA_API_URL = "https://api.pinata.cloud/pinning/pinJSONToIPFS"
DEFAULT_HTTP_TIMEOUT_SEC = 60.0


def load_passport_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides the process env."""
    load_dotenv(_ENV_PATH, override=False)


def _getenv_stripped(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_gemini_api_key() -> str:
    """Return GEMINI_API_KEY or empty string."""
    load_passport_env()
    return _getenv_stripped("GEMINI_API_KEY")


def require_gemini_api_key() -> str:
    """Return GEMINI_API_KEY; raise ConfigurationError when it is not set."""
    key = get_gemini_api_key()
    if not key:
        raise ConfigurationError("GEMINI_API_KEY is not set")
    return key


def get_gemini_model() -> str:
    load_passport_env()
    return _getenv_stripped("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL


def get_gemini_api_base() -> str:
    load_passport_env()
    return (_getenv_stripped("GEMINI_API_BASE") or DEFAULT_GEMINI_API_BASE).rstrip("/")


def get_pinata_api_url() -> str:
    load_passport_env()
    return _getenv_stripped("PINATA_API_URL") or DEFAULT_PINATA_API_URL


def get_http_timeout_sec() -> float:
    """HTTP_TIMEOUT_SEC as float; invalid or non-positive values fall back to the default."""
    load_passport_env()
    raw = _getenv_stripped("HTTP_TIMEOUT_SEC")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT_SEC


def pinata_auth_headers(jwt: str, api_key: str, secret_api_key: str) -> dict[str, str]:
    """
    Build Pinata auth headers. JWT wins over the key pair.
    Raises ConfigurationError when neither a JWT nor a complete key pair is given.
    """
    if jwt:
        return {"Authorization": f"Bearer {jwt}"}
    if api_key and secret_api_key:
        return {"pinata_api_key": api_key, "pinata_secret_api_key": secret_api_key}
    raise ConfigurationError("Pinata credentials not configured (PINATA_JWT or PINATA_API_KEY + PINATA_SECRET_API_KEY)")


def require_pinata_auth_headers() -> dict[str, str]:
    """Resolve Pinata auth headers from env; raise ConfigurationError when absent."""
    load_passport_env()
    return pinata_auth_headers(
        _getenv_stripped("PINATA_JWT"),
        _getenv_stripped("PINATA_API_KEY"),
        _getenv_stripped("PINATA_SECRET_API_KEY"),
    )


def print_passport_startup(script_name: str) -> None:
    """Print model and storage endpoint at script start. Credentials are never printed."""
    load_passport_env()
    key_state = "set" if get_gemini_api_key() else "missing"
    print(
        f"[credit_passport] {script_name} | model={get_gemini_model()} | "
        f"gemini_key={key_state} | pinata={get_pinata_api_url()}"
    )
