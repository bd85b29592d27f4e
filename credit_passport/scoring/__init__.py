"""
Scoring package: score codec, normalization and aggregation.

Normalizes heterogeneous national bureau scales onto a common 0–100 scale and
aggregates a user's profiles into dashboard statistics and a global score.
"""

from credit_passport.scoring.score_codec import (
    DEFAULT_SCORE_MAX,
    ScoreValue,
    default_max_for_country,
    format_score,
    normalize_to_percent,
    parse_score,
    score_from_value,
)
from credit_passport.scoring.aggregation import (
    AggregateStatistics,
    ScoreScale,
    aggregate_statistics,
    global_score,
    parse_utilization_percent,
)

__all__ = [
    "DEFAULT_SCORE_MAX",
    "ScoreValue",
    "default_max_for_country",
    "format_score",
    "normalize_to_percent",
    "parse_score",
    "score_from_value",
    "AggregateStatistics",
    "ScoreScale",
    "aggregate_statistics",
    "global_score",
    "parse_utilization_percent",
]
