"""
Canonical credit profile records.

ParsedProfile is the fully defaulted output of one extraction; PersistedProfile
is the same record as read back from storage (plus timestamp and content
reference). Both are immutable. Wire names (JSON, chain records) are camelCase;
attribute names are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from credit_passport.scoring.score_codec import DEFAULT_SCORE_MAX, ScoreValue, format_score

DEFAULT_NAME = "Unknown"
DEFAULT_COUNTRY = "Unknown"
DEFAULT_UTILIZATION = "0%"

# Field order shared by the on-chain record and the chain write call.
CHAIN_FIELD_ORDER: tuple[str, ...] = (
    "country",
    "name",
    "score",
    "ageMonths",
    "cards",
    "totalAccounts",
    "utilization",
    "delinquencies",
    "contentReferenceId",
    "timestamp",
)

# JSON key -> attribute name
WIRE_TO_ATTR: dict[str, str] = {
    "country": "country",
    "name": "name",
    "score": "score",
    "ageMonths": "age_months",
    "cards": "cards",
    "totalAccounts": "total_accounts",
    "utilization": "utilization",
    "delinquencies": "delinquencies",
    "analysis": "analysis",
    "markdownSummary": "markdown_summary",
    "contentReferenceId": "content_reference_id",
    "timestamp": "timestamp",
}

EXTRACTION_FIELDS: tuple[str, ...] = (
    "country",
    "name",
    "score",
    "ageMonths",
    "cards",
    "totalAccounts",
    "utilization",
    "delinquencies",
    "analysis",
    "markdownSummary",
)


@dataclass(frozen=True)
class FieldDefaultingNotice:
    """
    Non-fatal record that one extracted field was missing or malformed and
    was replaced by its default. Never raised.
    """

    field: str
    reason: str
    received: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


@dataclass(frozen=True)
class ParsedProfile:
    """Canonical, fully defaulted extraction output."""

    country: str = DEFAULT_COUNTRY
    name: str = DEFAULT_NAME
    score: ScoreValue = field(default_factory=lambda: ScoreValue.of(0, DEFAULT_SCORE_MAX))
    age_months: int = 0
    cards: int = 0
    total_accounts: int = 0
    utilization: str = DEFAULT_UTILIZATION
    delinquencies: int = 0
    analysis: str = ""
    markdown_summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON form; score as "num/max"."""
        return {
            "country": self.country,
            "name": self.name,
            "score": format_score(self.score),
            "ageMonths": self.age_months,
            "cards": self.cards,
            "totalAccounts": self.total_accounts,
            "utilization": self.utilization,
            "delinquencies": self.delinquencies,
            "analysis": self.analysis,
            "markdownSummary": self.markdown_summary,
        }


@dataclass(frozen=True)
class PersistedProfile:
    """
    A ParsedProfile as stored: the chain record does not carry analysis or
    markdown_summary (those live in the content blob), so they default to "".
    """

    country: str = DEFAULT_COUNTRY
    name: str = DEFAULT_NAME
    score: ScoreValue = field(default_factory=lambda: ScoreValue.of(0, DEFAULT_SCORE_MAX))
    age_months: int = 0
    cards: int = 0
    total_accounts: int = 0
    utilization: str = DEFAULT_UTILIZATION
    delinquencies: int = 0
    analysis: str = ""
    markdown_summary: str = ""
    timestamp: int = 0
    content_reference_id: str | None = None

    @classmethod
    def from_parsed(
        cls,
        profile: ParsedProfile,
        *,
        timestamp: int = 0,
        content_reference_id: str | None = None,
    ) -> "PersistedProfile":
        return cls(
            country=profile.country,
            name=profile.name,
            score=profile.score,
            age_months=profile.age_months,
            cards=profile.cards,
            total_accounts=profile.total_accounts,
            utilization=profile.utilization,
            delinquencies=profile.delinquencies,
            analysis=profile.analysis,
            markdown_summary=profile.markdown_summary,
            timestamp=timestamp,
            content_reference_id=content_reference_id,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "country": self.country,
            "name": self.name,
            "score": format_score(self.score),
            "ageMonths": self.age_months,
            "cards": self.cards,
            "totalAccounts": self.total_accounts,
            "utilization": self.utilization,
            "delinquencies": self.delinquencies,
            "contentReferenceId": self.content_reference_id,
            "timestamp": self.timestamp,
        }
        if self.analysis:
            out["analysis"] = self.analysis
        if self.markdown_summary:
            out["markdownSummary"] = self.markdown_summary
        return out


ProfileCollection = Sequence[PersistedProfile]
