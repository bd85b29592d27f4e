"""
Tests for the FastAPI server with collaborators overridden.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from conftest import USER_ADDRESS
from credit_passport.api_server.server import (
    app,
    get_extraction_adapter,
    get_ledger,
    get_pinner,
)
from credit_passport.core.exceptions import TransportError
from credit_passport.extraction.adapter import ExtractionAdapter
from credit_passport.storage.ledger import InMemoryProfileLedger

CONFIRMED = {
    "country": "USA",
    "name": "Jane Q. Sample",
    "score": "740/850",
    "ageMonths": 110,
    "cards": 3,
    "totalAccounts": 7,
    "utilization": "20%",
    "delinquencies": 0,
    "analysis": "Strong.",
    "markdownSummary": "## 740",
}


class StaticGenerator:
    def __init__(self, answer: str) -> None:
        self.answer = answer

    def generate(self, prompt: str) -> str:
        return self.answer


class StubPinner:
    def __init__(self) -> None:
        self.count = 0
        self.pinned: list[dict] = []

    def pin_json(self, content):
        self.count += 1
        self.pinned.append(content)
        return f"bafyCID{self.count}"


class BrokenPinner:
    def pin_json(self, content):
        raise TransportError("Pinata error 500", status_code=500, body="boom")


@pytest.fixture
def ledger():
    ticks = iter(range(1700000000, 1700001000))
    return InMemoryProfileLedger(clock=lambda: next(ticks))


@pytest.fixture
def pinner():
    return StubPinner()


@pytest.fixture
def client(ledger, pinner):
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_pinner] = lambda: pinner
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_generator(answer: str) -> None:
    app.dependency_overrides[get_extraction_adapter] = lambda: ExtractionAdapter(StaticGenerator(answer))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_extract(client, sofi_report):
    _use_generator("```json\n" + json.dumps(dict(CONFIRMED, country="Canada", score=742)) + "\n```")
    resp = client.post("/api/extract", json={"text": sofi_report, "country": "Canada"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["country"] == "USA"
    assert data["score"] == "742/850"
    assert data["defaultedFields"] == []


def test_extract_rejects_empty_text(client):
    _use_generator("{}")
    assert client.post("/api/extract", json={"text": ""}).status_code == 422


def test_extract_unparseable_answer(client):
    _use_generator("I could not read this report.")
    resp = client.post("/api/extract", json={"text": "report"})
    assert resp.status_code == 422
    assert resp.json()["details"] == "I could not read this report."


def test_extract_missing_key_is_configuration_error(client):
    app.dependency_overrides.pop(get_extraction_adapter, None)
    resp = client.post("/api/extract", json={"text": "report"})
    assert resp.status_code == 500
    assert "GEMINI_API_KEY" in resp.json()["error"]


def test_pin(client, pinner):
    resp = client.post("/api/pin", json={"hello": "world"})
    assert resp.status_code == 200
    assert resp.json() == {"cid": "bafyCID1"}
    assert pinner.pinned == [{"hello": "world"}]


def test_pin_rejects_non_object(client):
    assert client.post("/api/pin", json=[1, 2]).status_code == 400
    resp = client.post("/api/pin", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_pin_transport_error(client):
    app.dependency_overrides[get_pinner] = lambda: BrokenPinner()
    resp = client.post("/api/pin", json={"a": 1})
    assert resp.status_code == 502
    assert resp.json()["status"] == 500
    assert resp.json()["details"] == "boom"


def test_confirm_and_list_profiles(client, pinner):
    resp = client.post(f"/api/profiles/{USER_ADDRESS}", json=CONFIRMED)
    assert resp.status_code == 200
    receipt = resp.json()
    assert receipt["cid"] == "bafyCID1"
    assert receipt["args"] == ["USA", "Jane Q. Sample", "740/850", 110, 3, 7, "20%", 0, "bafyCID1"]
    assert pinner.pinned[0]["userAddress"] == USER_ADDRESS
    assert pinner.pinned[0]["markdownSummary"] == "## 740"

    second = dict(CONFIRMED, country="Canada", score="650/900", utilization="23.5%", delinquencies=1)
    assert client.post(f"/api/profiles/{USER_ADDRESS}", json=second).status_code == 200

    data = client.get(f"/api/profiles/{USER_ADDRESS}").json()
    assert [p["country"] for p in data["profiles"]] == ["USA", "Canada"]
    assert [p["contentReferenceId"] for p in data["profiles"]] == ["bafyCID1", "bafyCID2"]
    assert data["globalScore"] == 80
    assert data["scale"] == "percent"
    stats = data["dashboard"]["statistics"]
    assert stats["averageUtilizationPercent"] == pytest.approx(21.75, abs=0.01)
    assert stats["totalDelinquencies"] == 1
    assert data["dashboard"]["display"]["countryFlags"] == ["🇺🇸", "🇨🇦"]


def test_list_profiles_legacy_scale(client):
    client.post(f"/api/profiles/{USER_ADDRESS}", json=CONFIRMED)
    data = client.get(f"/api/profiles/{USER_ADDRESS}", params={"scale": "legacy_850"}).json()
    assert data["globalScore"] == 740
    assert data["scale"] == "legacy_850"


def test_list_profiles_empty(client):
    data = client.get(f"/api/profiles/{USER_ADDRESS}").json()
    assert data["profiles"] == []
    assert data["globalScore"] is None
    assert data["dashboard"]["display"]["globalScore"] == "—"


def test_invalid_address(client):
    assert client.get("/api/profiles/not-an-address").status_code == 400
    assert client.post("/api/profiles/0x123", json=CONFIRMED).status_code == 400


def test_confirm_persistence_error(client):
    app.dependency_overrides[get_pinner] = lambda: BrokenPinner()
    resp = client.post(f"/api/profiles/{USER_ADDRESS}", json=CONFIRMED)
    assert resp.status_code == 502
    assert resp.json()["stage"] == "content"
    assert resp.json()["cid"] is None
