"""
Score codec: the "NUM/MAX" string representation of a bureau score.

Bureaus report on different scales (FICO 300–850, Equifax Canada 300–900, ...).
A ScoreValue keeps the raw pair so any score can later be normalized onto the
common 0–100 scale. Parsing never raises: malformed input yields a best-effort
value with num=0 and/or max=DEFAULT_SCORE_MAX.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

DEFAULT_SCORE_MAX = 850

# Score ceiling by country convention, used when a report gives a bare number.
COUNTRY_SCORE_MAX: dict[str, int] = {
    "USA": 850,
    "Canada": 900,
}

_COUNTRY_ALIASES: dict[str, str] = {
    "us": "USA",
    "usa": "USA",
    "u.s.": "USA",
    "u.s.a.": "USA",
    "united states": "USA",
    "united states of america": "USA",
    "ca": "Canada",
    "can": "Canada",
    "canada": "Canada",
}

_INT_PREFIX_RE = re.compile(r"^\s*(?P<int>[-+]?\d+)(?:\.\d+)?")


@dataclass(frozen=True)
class ScoreValue:
    """Immutable bureau score. raw is always f"{num}/{max}"."""

    raw: str
    num: int
    max: int

    @classmethod
    def of(cls, num: int, max_: int = DEFAULT_SCORE_MAX) -> "ScoreValue":
        return cls(raw=f"{num}/{max_}", num=num, max=max_)


def canonical_country(country: str | None) -> str | None:
    """Map common spellings ("US", "united states") onto the canonical country label."""
    if country is None:
        return None
    text = str(country).strip()
    if not text:
        return None
    return _COUNTRY_ALIASES.get(text.lower(), text)


def default_max_for_country(country: str | None) -> int:
    """Conventional score ceiling for country; DEFAULT_SCORE_MAX when unknown."""
    label = canonical_country(country)
    if label is None:
        return DEFAULT_SCORE_MAX
    return COUNTRY_SCORE_MAX.get(label, DEFAULT_SCORE_MAX)


def _leading_int(text: str) -> int | None:
    """
    Integer part of the leading number in text ("720 pts" -> 720, "720.9" -> 720);
    None if absent. Parsed from the digits, so arbitrarily large values are exact.
    """
    match = _INT_PREFIX_RE.match(text)
    if not match:
        return None
    return int(match.group("int"))


def parse_score(raw: str | None, *, default_max: int = DEFAULT_SCORE_MAX) -> ScoreValue:
    """
    Parse "NUM/MAX". Left side -> num (0 if non-numeric), right side -> max
    (default_max if absent, non-numeric or not positive). Never raises.
    """
    text = "" if raw is None else str(raw)
    left, sep, right = text.partition("/")
    num = _leading_int(left)
    if num is None:
        num = 0
    max_ = _leading_int(right) if sep else None
    if max_ is None or max_ <= 0:
        max_ = default_max if default_max > 0 else DEFAULT_SCORE_MAX
    return ScoreValue.of(num, max_)


def format_score(score: ScoreValue) -> str:
    """Canonical "num/max" form; inverse of parse_score for well-formed input."""
    return f"{score.num}/{score.max}"


def normalize_to_percent(score: ScoreValue) -> float:
    """(num / max) * 100 clamped to [0, 100]. max == 0 (or negative) yields 0.0."""
    if score.max <= 0:
        return 0.0
    pct = (score.num / score.max) * 100.0
    if not math.isfinite(pct):
        return 0.0
    return max(0.0, min(100.0, pct))


def score_from_value(value: Any, country: str | None = None) -> ScoreValue:
    """
    Coerce a loosely typed score (as returned by an extractor or a chain read)
    into a ScoreValue. Bare numbers get the country's conventional max.

    Accepts ScoreValue, int, float, numeric strings, "N/M" strings and dicts
    carrying num/max. Anything else yields num=0.
    """
    default_max = default_max_for_country(country)
    if isinstance(value, ScoreValue):
        return value
    if isinstance(value, bool) or value is None:
        return ScoreValue.of(0, default_max)
    if isinstance(value, int):
        return ScoreValue.of(value, default_max)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ScoreValue.of(0, default_max)
        return ScoreValue.of(int(round(value)), default_max)
    if isinstance(value, dict):
        num = value.get("num", value.get("score"))
        max_ = value.get("max")
        base = score_from_value(num, country)
        if isinstance(max_, (int, float)) and not isinstance(max_, bool) and max_ > 0:
            return ScoreValue.of(base.num, int(max_))
        return base
    return parse_score(str(value), default_max=default_max)
