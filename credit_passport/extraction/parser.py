"""
Extraction response parsing: model text -> ParsedProfile.

The model is asked for JSON only but often wraps it in a ``` fence; the fence
is stripped before decoding. Undecodable text raises ExtractionParseError
with the raw text. Any individual field that is missing or of the wrong type
is replaced by its default and recorded as a FieldDefaultingNotice; that is
never fatal.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from credit_passport.core.exceptions import ExtractionParseError
from credit_passport.extraction.prompt import detect_issuer_country, resolve_country
from credit_passport.passport_logging import get_logger
from credit_passport.profiles.models import (
    DEFAULT_COUNTRY,
    DEFAULT_NAME,
    DEFAULT_UTILIZATION,
    FieldDefaultingNotice,
    ParsedProfile,
)
from credit_passport.scoring.score_codec import ScoreValue, canonical_country, score_from_value

logger = get_logger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```[\w-]*[ \t]*\r?\n?")
_FENCE_CLOSE_RE = re.compile(r"\r?\n?```\s*$")
_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?\d+(?:\.\d+)?")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```/```json fence if present; otherwise return text stripped."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _FENCE_OPEN_RE.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE_RE.sub("", stripped, count=1)
    return stripped.strip()


def decode_extraction_json(text: str) -> dict[str, Any]:
    """Fence-strip and JSON-decode; the result must be a JSON object."""
    body = strip_code_fence(text or "")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ExtractionParseError(f"Extraction response is not valid JSON: {e.msg}", raw_text=text) from e
    if not isinstance(data, dict):
        raise ExtractionParseError(
            f"Extraction response is JSON {type(data).__name__}, expected an object",
            raw_text=text,
        )
    return data


class _FieldReader:
    """Reads fields from decoded JSON, defaulting and recording notices as it goes."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data
        self.notices: list[FieldDefaultingNotice] = []

    def note(self, field: str, reason: str, received: Any = None) -> None:
        self.notices.append(FieldDefaultingNotice(field=field, reason=reason, received=received))

    def raw(self, key: str) -> Any:
        return self._data.get(key)

    def text(self, key: str, default: str) -> str:
        value = self._data.get(key)
        if value is None:
            self.note(key, "missing")
            return default
        if not isinstance(value, str):
            self.note(key, "wrong_type", value)
            return default
        stripped = value.strip()
        if not stripped and default:
            self.note(key, "empty")
            return default
        return stripped

    def count(self, key: str) -> int:
        value = self._data.get(key)
        if value is None:
            self.note(key, "missing")
            return 0
        number: float | None = None
        if isinstance(value, bool):
            number = None
        elif isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            match = _LEADING_NUMBER_RE.match(value)
            number = float(match.group(0)) if match else None
        if number is None or not math.isfinite(number):
            self.note(key, "wrong_type", value)
            return 0
        if number < 0:
            self.note(key, "negative", value)
            return 0
        return int(number)

    def score(self, key: str, country: str | None) -> ScoreValue:
        """Score as NUM/MAX or a bare number; bare numbers take the country max."""
        value = self._data.get(key)
        if value is None:
            self.note(key, "missing")
            return score_from_value(None, country)
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            self.note(key, "wrong_type", value)
            return score_from_value(None, country)
        if isinstance(value, str) and not _LEADING_NUMBER_RE.match(value):
            self.note(key, "unparseable", value)
        return score_from_value(value, country)

    def utilization(self, key: str) -> str:
        value = self._data.get(key)
        if value is None:
            self.note(key, "missing")
            return DEFAULT_UTILIZATION
        if isinstance(value, bool):
            self.note(key, "wrong_type", value)
            return DEFAULT_UTILIZATION
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                self.note(key, "wrong_type", value)
                return DEFAULT_UTILIZATION
            return f"{value:g}%"
        if isinstance(value, str) and value.strip():
            return value.strip()
        self.note(key, "wrong_type", value)
        return DEFAULT_UTILIZATION


def _resolve_profile_country(reader: _FieldReader, report_text: str, country_hint: str | None) -> str:
    issuer_country = detect_issuer_country(report_text)
    if issuer_country is not None:
        return issuer_country
    model_country = reader.raw("country")
    if isinstance(model_country, str) and model_country.strip():
        return canonical_country(model_country) or DEFAULT_COUNTRY
    if model_country is not None and not isinstance(model_country, str):
        reader.note("country", "wrong_type", model_country)
    else:
        reader.note("country", "missing")
    return resolve_country(report_text, country_hint) or DEFAULT_COUNTRY


def profile_from_payload(
    data: dict[str, Any],
    *,
    report_text: str = "",
    country_hint: str | None = None,
) -> tuple[ParsedProfile, list[FieldDefaultingNotice]]:
    """
    Build a fully defaulted ParsedProfile from decoded extraction JSON.

    Country: an issuer signature in report_text wins, then the model's answer,
    then the user's hint, then "Unknown". A bare numeric score takes the
    country's conventional maximum.
    """
    reader = _FieldReader(data)
    country = _resolve_profile_country(reader, report_text, country_hint)
    score_country = None if country == DEFAULT_COUNTRY else country

    profile = ParsedProfile(
        country=country,
        name=reader.text("name", DEFAULT_NAME),
        score=reader.score("score", score_country),
        age_months=reader.count("ageMonths"),
        cards=reader.count("cards"),
        total_accounts=reader.count("totalAccounts"),
        utilization=reader.utilization("utilization"),
        delinquencies=reader.count("delinquencies"),
        analysis=reader.text("analysis", ""),
        markdown_summary=reader.text("markdownSummary", ""),
    )
    return profile, reader.notices


def parse_extraction_response(
    response_text: str,
    *,
    report_text: str = "",
    country_hint: str | None = None,
) -> tuple[ParsedProfile, list[FieldDefaultingNotice]]:
    """Decode model output and default its fields. Raises ExtractionParseError on bad JSON."""
    data = decode_extraction_json(response_text)
    profile, notices = profile_from_payload(data, report_text=report_text, country_hint=country_hint)
    for notice in notices:
        logger.debug("extraction_field_defaulted", field=notice.field, reason=notice.reason)
    return profile, notices
