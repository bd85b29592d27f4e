"""
FastAPI server: extraction, content pinning, profile commit and dashboard.

POST /api/extract                  report text + country -> ParsedProfile (+ defaultedFields)
POST /api/pin                      JSON object -> {"cid": ...}
POST /api/profiles/{address}       confirmed ParsedProfile -> pinned + written to the ledger
GET  /api/profiles/{address}       decoded profiles + dashboard statistics + global score

Collaborators (extraction adapter, pinner, ledger) are dependencies so tests
and deployments can override them. Engine errors map to HTTP status codes in
one place (see _register_error_handlers).
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from credit_passport import __version__
from credit_passport.config.settings import Settings, get_settings
from credit_passport.core.exceptions import (
    ConfigurationError,
    ExtractionParseError,
    PersistenceError,
    TransportError,
)
from credit_passport.extraction.adapter import ExtractionAdapter
from credit_passport.extraction.gemini_client import GeminiClient
from credit_passport.extraction.parser import profile_from_payload
from credit_passport.passport_logging import get_logger
from credit_passport.profiles.decoder import decode_profiles
from credit_passport.profiles.envelope import commit_profile
from credit_passport.scoring.aggregation import ScoreScale, global_score
from credit_passport.scoring.dashboard import dashboard_summary
from credit_passport.storage.ledger import InMemoryProfileLedger
from credit_passport.storage.pinata import PinataPinner

logger = get_logger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_ERROR_DETAIL_LIMIT = 2000


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

_ledger = InMemoryProfileLedger()


def get_ledger() -> InMemoryProfileLedger:
    """Dependency: process-wide development ledger. Override with a chain-backed reader/writer."""
    return _ledger


def get_extraction_adapter(settings: Settings = Depends(get_settings)) -> Iterator[ExtractionAdapter]:
    """Dependency: Gemini-backed adapter; ConfigurationError (500) when GEMINI_API_KEY is missing."""
    with GeminiClient(settings) as client:
        yield ExtractionAdapter(client)


def get_pinner(settings: Settings = Depends(get_settings)) -> Iterator[PinataPinner]:
    """Dependency: Pinata pinner; ConfigurationError (500) when Pinata credentials are missing."""
    with PinataPinner(settings) as pinner:
        yield pinner


def _require_address(address: str) -> str:
    address = address.strip()
    if not _ADDRESS_RE.match(address):
        raise HTTPException(status_code=400, detail="address must be a 0x-prefixed 20-byte hex address")
    return address


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class ExtractRequest(BaseModel):
    """POST /api/extract body."""

    text: str = Field(..., min_length=1, description="Raw credit report text")
    country: str | None = Field(None, max_length=64, description="User-selected country, or 'Auto'")


class ConfirmProfileRequest(BaseModel):
    """POST /api/profiles/{address} body: a ParsedProfile as returned by /api/extract."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    country: str | None = None
    name: str | None = None
    score: str | int | float | None = None
    age_months: int | None = Field(None, alias="ageMonths")
    cards: int | None = None
    total_accounts: int | None = Field(None, alias="totalAccounts")
    utilization: str | None = None
    delinquencies: int | None = None
    analysis: str | None = None
    markdown_summary: str | None = Field(None, alias="markdownSummary")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Credit Passport API",
    description="Credit report extraction, normalization and aggregation.",
    version=__version__,
)


def _register_error_handlers(application: FastAPI) -> None:
    @application.exception_handler(ConfigurationError)
    async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("api_configuration_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @application.exception_handler(TransportError)
    async def _transport_error(request: Request, exc: TransportError) -> JSONResponse:
        logger.warning("api_transport_error", path=request.url.path, status=exc.status_code)
        return JSONResponse(
            status_code=502,
            content={"error": str(exc), "status": exc.status_code, "details": exc.body[:_ERROR_DETAIL_LIMIT]},
        )

    @application.exception_handler(ExtractionParseError)
    async def _parse_error(request: Request, exc: ExtractionParseError) -> JSONResponse:
        logger.warning("api_extraction_parse_error", path=request.url.path)
        return JSONResponse(
            status_code=422,
            content={"error": str(exc), "details": (exc.raw_text or "")[:_ERROR_DETAIL_LIMIT]},
        )

    @application.exception_handler(PersistenceError)
    async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"error": str(exc), "stage": exc.stage, "cid": exc.content_reference_id},
        )


_register_error_handlers(app)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/extract")
def extract(body: ExtractRequest, adapter: ExtractionAdapter = Depends(get_extraction_adapter)) -> dict[str, Any]:
    """Run one extraction. The result is not stored until the user confirms it."""
    result = adapter.extract(body.text, body.country)
    return result.to_dict()


@app.post("/api/pin")
async def pin(request: Request, pinner: PinataPinner = Depends(get_pinner)) -> dict[str, str]:
    """Pin an arbitrary JSON object; 400 when the body is not a JSON object."""
    try:
        content = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(content, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")
    return {"cid": pinner.pin_json(content)}


@app.post("/api/profiles/{address}")
def confirm_profile(
    address: str,
    body: ConfirmProfileRequest,
    pinner: PinataPinner = Depends(get_pinner),
    ledger: InMemoryProfileLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Commit a confirmed profile: pin the content blob, then write the ledger record."""
    address = _require_address(address)
    profile, _ = profile_from_payload(body.model_dump(by_alias=True))
    receipt = commit_profile(profile, address, pinner, ledger)
    return receipt.to_dict()


@app.get("/api/profiles/{address}")
def list_profiles(
    address: str,
    scale: ScoreScale = ScoreScale.PERCENT,
    ledger: InMemoryProfileLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Decoded profiles for address with dashboard statistics; globalScore uses the requested scale."""
    address = _require_address(address)
    profiles = decode_profiles(ledger.get_profiles(address))
    return {
        "address": address,
        "profiles": [p.to_dict() for p in profiles],
        "dashboard": dashboard_summary(profiles),
        "globalScore": global_score(profiles, scale=scale),
        "scale": scale.value,
    }
