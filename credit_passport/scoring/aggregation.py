"""
Normalization & aggregation over a user's profile collection.

Each bureau score is normalized to a percentage of its own scale maximum, so
a 740/850 FICO and a 650/900 Equifax Canada score become comparable. The
global score is the rounded mean of those percentages. Dashboard statistics
sum history, accounts, cards and delinquencies and average the parseable
utilization values.

Everything here is a pure function of the collection passed in: no I/O,
no shared state, same input -> same output.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Sequence, Union

from credit_passport.scoring.score_codec import normalize_to_percent

if TYPE_CHECKING:
    from credit_passport.profiles.models import ParsedProfile, PersistedProfile

    AnyProfile = Union[ParsedProfile, PersistedProfile]

GLOBAL_SCORE_MIN = 0
GLOBAL_SCORE_MAX = 100
LEGACY_GLOBAL_SCORE_MAX = 850

_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


class ScoreScale(str, Enum):
    """
    Versioned global-score contract. PERCENT (0–100) is canonical;
    LEGACY_850 reproduces the earlier 850-point global score and must be
    requested explicitly.
    """

    PERCENT = "percent"
    LEGACY_850 = "legacy_850"


@dataclass(frozen=True)
class AggregateStatistics:
    """Derived dashboard statistics for one ProfileCollection. Never stored."""

    profile_count: int
    total_history_months: int
    total_accounts: int
    total_cards: int
    average_utilization_percent: float | None
    total_delinquencies: int
    distinct_countries: tuple[str, ...]
    global_score: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "profileCount": self.profile_count,
            "totalHistoryMonths": self.total_history_months,
            "totalAccounts": self.total_accounts,
            "totalCards": self.total_cards,
            "averageUtilizationPercent": self.average_utilization_percent,
            "totalDelinquencies": self.total_delinquencies,
            "distinctCountries": list(self.distinct_countries),
            "globalScore": self.global_score,
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalized_percents(profiles: Iterable[AnyProfile]) -> list[float]:
    """normalize_to_percent(profile.score) for each profile, in order."""
    return [normalize_to_percent(p.score) for p in profiles]


def global_score(
    profiles: Sequence[AnyProfile],
    *,
    scale: ScoreScale = ScoreScale.PERCENT,
) -> int | None:
    """
    Mean of per-profile normalized percentages, rounded to the nearest integer
    and clamped to [0, 100]. None for an empty collection.

    scale=ScoreScale.LEGACY_850 returns the same mean rescaled to 0–850.
    """
    percents = normalized_percents(profiles)
    if not percents:
        return None
    mean = sum(percents) / len(percents)
    if scale is ScoreScale.LEGACY_850:
        legacy = _round_half_up(mean / 100.0 * LEGACY_GLOBAL_SCORE_MAX)
        return max(0, min(LEGACY_GLOBAL_SCORE_MAX, legacy))
    return max(GLOBAL_SCORE_MIN, min(GLOBAL_SCORE_MAX, _round_half_up(mean)))


def parse_utilization_percent(utilization: Any) -> float | None:
    """
    Leading numeric portion of a utilization string ("28%" -> 28.0,
    "approx. 15.5 %" -> 15.5). None when no number is present or the
    number is negative, so "-5%" is left out of averages.
    """
    if utilization is None:
        return None
    match = _NUMBER_RE.search(str(utilization))
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value) or value < 0:
        return None
    return value


def average_utilization(profiles: Iterable[AnyProfile]) -> float | None:
    """Mean of parseable utilization values; profiles without a number are ignored."""
    values = [v for v in (parse_utilization_percent(p.utilization) for p in profiles) if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def distinct_countries(profiles: Iterable[AnyProfile]) -> tuple[str, ...]:
    """Unique countries in first-seen order (order is for display only)."""
    seen: dict[str, None] = {}
    for p in profiles:
        seen.setdefault(p.country, None)
    return tuple(seen)


def aggregate_statistics(profiles: Sequence[AnyProfile]) -> AggregateStatistics:
    """Compute AggregateStatistics for a collection; all zeros / None when empty."""
    items = list(profiles)
    return AggregateStatistics(
        profile_count=len(items),
        total_history_months=sum(p.age_months for p in items),
        total_accounts=sum(p.total_accounts for p in items),
        total_cards=sum(p.cards for p in items),
        average_utilization_percent=average_utilization(items),
        total_delinquencies=sum(p.delinquencies for p in items),
        distinct_countries=distinct_countries(items),
        global_score=global_score(items),
    )
