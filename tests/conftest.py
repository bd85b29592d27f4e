"""
Pytest fixtures for Credit Passport tests.

Environment is isolated per test (no .env loading, credentials cleared), and
HTTP collaborators run against httpx.MockTransport so no network is used.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from credit_passport.config.settings import Settings

CREDENTIAL_ENV_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_API_BASE",
    "PINATA_JWT",
    "PINATA_API_KEY",
    "PINATA_SECRET_API_KEY",
    "PINATA_API_URL",
    "HTTP_TIMEOUT_SEC",
)

USER_ADDRESS = "0x1111111111111111111111111111111111111111"

SOFI_REPORT = """SoFi Credit Insights
Member: Jane Q. Sample
VantageScore 3.0: 742
Open credit cards: 3
Total accounts: 7
Credit usage: 18%
Oldest account: 9 years 2 months
Late payments: 0
"""

BORROWELL_REPORT = """Borrowell - Your Equifax credit report
Name: John Example
Credit score: 781
Revolving utilization 22%
Accounts: 5 (credit cards: 2)
Length of credit history: 64 months
Derogatory marks: 1
"""


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Clear credential env vars and stop .env from repopulating them."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    import credit_passport.config.env as env

    monkeypatch.setattr(env, "load_passport_env", lambda: None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gemini_api_key="test-gemini-key",
        gemini_model="gemini-test",
        gemini_api_base="https://gemini.test/v1beta",
        pinata_jwt="test-jwt",
        pinata_api_url="https://pinata.test/pinning/pinJSONToIPFS",
        http_timeout_sec=5.0,
    )


@pytest.fixture
def sofi_report() -> str:
    return SOFI_REPORT


@pytest.fixture
def borrowell_report() -> str:
    return BORROWELL_REPORT


def gemini_body(text: str) -> dict[str, Any]:
    """generateContent response wrapping text as the first candidate."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def mock_http() -> Callable[..., httpx.Client]:
    """
    Build an httpx.Client whose requests are answered by handler.
    Captured requests are appended to client.captured (list of httpx.Request).
    """

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        captured: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        client.captured = captured  # type: ignore[attr-defined]
        return client

    return factory


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))
