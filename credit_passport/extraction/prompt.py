"""
Extraction contract: the instruction block sent with every report.

The block fixes the output field set, requires JSON-only output, and spells
out per-field semantics (country resolution, score form, defaults). It also
asks the model not to carry personal identifiers beyond the holder's name.
That privacy rule is best-effort: it constrains the request, and nothing in
the engine verifies the model honoured it.
"""

from __future__ import annotations

import re

from credit_passport.profiles.models import EXTRACTION_FIELDS
from credit_passport.scoring.score_codec import COUNTRY_SCORE_MAX, DEFAULT_SCORE_MAX, canonical_country

# Hint values meaning "let the report decide".
AUTO_DETECT_HINTS = frozenset({"", "auto", "auto-detect", "autodetect", "detect", "unknown"})

# Issuer name found in the report text -> country it deterministically implies.
ISSUER_COUNTRY_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("SoFi", "USA"),
    ("Borrowell", "Canada"),
)

# Issuer names as printed, whole words only ("Sofia" is not "SoFi").
_ISSUER_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(rf"\b{re.escape(issuer)}\b"), country) for issuer, country in ISSUER_COUNTRY_OVERRIDES
)


def is_auto_detect(hint: str | None) -> bool:
    return hint is None or hint.strip().lower() in AUTO_DETECT_HINTS


def detect_issuer_country(report_text: str) -> str | None:
    """Country implied by a known issuer signature in the report text, if any."""
    for pattern, country in _ISSUER_PATTERNS:
        if pattern.search(report_text):
            return country
    return None


def resolve_country(report_text: str, hint: str | None) -> str | None:
    """
    Issuer signature first, then the user's hint. An auto-detect hint with no
    signature resolves to None (unknown).
    """
    issuer_country = detect_issuer_country(report_text)
    if issuer_country is not None:
        return issuer_country
    if is_auto_detect(hint):
        return None
    return canonical_country(hint)


def _score_max_rules() -> str:
    known = ", ".join(f"{max_} for {country}" for country, max_ in COUNTRY_SCORE_MAX.items())
    return f"{known}, and {DEFAULT_SCORE_MAX} when the country is unknown"


def _issuer_rules() -> str:
    return "; ".join(f'a report issued by "{issuer}" is from {country}' for issuer, country in ISSUER_COUNTRY_OVERRIDES)


def build_instruction_block() -> str:
    """The fixed extraction contract shared by every request."""
    keys = ", ".join(EXTRACTION_FIELDS)
    return f"""You are a credit report normalization engine.
Read the credit report below and return ONLY a single JSON object, with no prose and no code fences.
The object must have exactly these keys: {keys}. Use null for anything the report does not state.

Field rules:
- country: the issuing country of the report. If the report names a known issuer, that decides the country ({_issuer_rules()}). Otherwise use the country selected by the user. If the user selected auto-detect and the report does not make the country clear, use null.
- name: the report holder's full name as printed, or null.
- score: the credit score as a string "NUM/MAX", for example "720/850". If the report gives only one number, use the country's usual maximum: {_score_max_rules()}.
- ageMonths: age of the oldest account (length of credit history) in whole months.
- cards: number of open credit card accounts.
- totalAccounts: total number of credit accounts of any type.
- utilization: overall revolving credit utilization as a percentage string, for example "28%".
- delinquencies: number of late payments, collections or other derogatory marks.
- analysis: two or three sentences assessing creditworthiness.
- markdownSummary: a short markdown summary of the report for display.

Privacy rules:
- Do not include any personal identifying details other than the holder's name.
- Never output street addresses, dates of birth, social security or social insurance numbers, other government ID numbers, phone numbers, email addresses, or account numbers, in any field including analysis and markdownSummary.
"""


def build_extraction_prompt(report_text: str, country_hint: str | None) -> str:
    """Instruction block + the user's country selection + the raw report text."""
    selected = "auto-detect" if is_auto_detect(country_hint) else country_hint.strip()
    return (
        f"{build_instruction_block()}\n"
        f"User-selected country: {selected}\n\n"
        f"Credit report:\n{report_text}\n"
    )
