"""
Dashboard presentation values derived from AggregateStatistics.

Formatting only; no rendering. The API server and the aggregate_profiles tool
return dashboard_summary() as JSON.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from credit_passport.scoring.aggregation import aggregate_statistics
from credit_passport.scoring.score_codec import format_score

if TYPE_CHECKING:
    from credit_passport.scoring.aggregation import AnyProfile

COUNTRY_FLAGS: dict[str, str] = {
    "Canada": "🇨🇦",
    "USA": "🇺🇸",
    "Mexico": "🇲🇽",
    "UK": "🇬🇧",
    "Germany": "🇩🇪",
    "Japan": "🇯🇵",
    "Singapore": "🇸🇬",
}
UNKNOWN_COUNTRY_FLAG = "🌍"
MISSING_VALUE = "—"


def country_flag(country: str, flags: dict[str, str] | None = None) -> str:
    return (flags if flags is not None else COUNTRY_FLAGS).get(country, UNKNOWN_COUNTRY_FLAG)


def format_history_duration(months: int) -> str:
    """Under a year in months ("7 mo"), otherwise years with one decimal ("2.5 yr")."""
    if months < 12:
        return f"{months} mo"
    return f"{months / 12:.1f} yr"


def format_utilization(value: float | None) -> str:
    if value is None:
        return MISSING_VALUE
    return f"{value:.1f}%"


def dashboard_summary(
    profiles: Sequence[AnyProfile],
    *,
    flags: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Statistics plus display strings and one chip per profile (country, flag, score)."""
    stats = aggregate_statistics(profiles)
    return {
        "statistics": stats.to_dict(),
        "display": {
            "creditHistory": format_history_duration(stats.total_history_months),
            "averageUtilization": format_utilization(stats.average_utilization_percent),
            "globalScore": MISSING_VALUE if stats.global_score is None else str(stats.global_score),
            "countryFlags": [country_flag(c, flags) for c in stats.distinct_countries],
        },
        "profiles": [
            {
                "country": p.country,
                "flag": country_flag(p.country, flags),
                "score": format_score(p.score),
                "timestamp": getattr(p, "timestamp", None),
            }
            for p in profiles
        ],
    }
