"""
Tests for normalization, global score, aggregate statistics and dashboard helpers.
"""

from __future__ import annotations

import pytest

from credit_passport.profiles.models import ParsedProfile, PersistedProfile
from credit_passport.scoring.aggregation import (
    ScoreScale,
    aggregate_statistics,
    average_utilization,
    distinct_countries,
    global_score,
    normalized_percents,
    parse_utilization_percent,
)
from credit_passport.scoring.dashboard import (
    UNKNOWN_COUNTRY_FLAG,
    country_flag,
    dashboard_summary,
    format_history_duration,
    format_utilization,
)
from credit_passport.scoring.score_codec import parse_score


def _profile(score="700/850", country="USA", utilization="10%", age=12, cards=1, accounts=2, delinquencies=0, ts=1):
    return PersistedProfile(
        country=country,
        score=parse_score(score),
        utilization=utilization,
        age_months=age,
        cards=cards,
        total_accounts=accounts,
        delinquencies=delinquencies,
        timestamp=ts,
    )


def test_global_score_mixed_scales():
    profiles = [_profile("740/850"), _profile("650/900", country="Canada")]
    # (87.0588 + 72.2222) / 2 = 79.64 -> 80
    assert normalized_percents(profiles) == pytest.approx([87.06, 72.22], abs=0.01)
    assert global_score(profiles) == 80


def test_global_score_empty_is_none():
    assert global_score([]) is None
    assert aggregate_statistics([]).global_score is None


def test_global_score_single_profile():
    assert global_score([_profile("425/850")]) == 50


def test_global_score_rounds_half_up():
    # 62.5% mean
    profiles = [_profile("50/100"), _profile("75/100")]
    assert global_score(profiles) == 63


def test_global_score_is_order_independent():
    profiles = [_profile("740/850"), _profile("650/900"), _profile("300/850")]
    assert global_score(profiles) == global_score(list(reversed(profiles)))


def test_global_score_bounded():
    assert global_score([_profile("900/850")]) == 100
    assert global_score([_profile("0/850")]) == 0


def test_global_score_legacy_scale():
    profiles = [_profile("740/850"), _profile("650/900")]
    # 79.64% of 850 = 676.9 -> 677
    assert global_score(profiles, scale=ScoreScale.LEGACY_850) == 677
    assert global_score([_profile("900/850")], scale=ScoreScale.LEGACY_850) == 850


def test_global_score_accepts_parsed_profiles():
    assert global_score([ParsedProfile(score=parse_score("720/900"))]) == 80


@pytest.mark.parametrize(
    "text,expected",
    [("28%", 28.0), ("approx. 15.5 %", 15.5), ("0%", 0.0), ("n/a", None), ("", None), (None, None), (".5%", 0.5)],
)
def test_parse_utilization_percent(text, expected):
    assert parse_utilization_percent(text) == expected


def test_average_utilization_ignores_unparseable():
    profiles = [_profile(utilization="20%"), _profile(utilization="unknown"), _profile(utilization="23.5%")]
    assert average_utilization(profiles) == pytest.approx(21.75, abs=0.01)


def test_average_utilization_none_when_nothing_parses():
    assert average_utilization([_profile(utilization="n/a")]) is None
    assert average_utilization([]) is None


def test_distinct_countries_first_seen():
    profiles = [_profile(country="USA"), _profile(country="Canada"), _profile(country="USA")]
    assert distinct_countries(profiles) == ("USA", "Canada")


def test_aggregate_statistics_sums():
    profiles = [
        _profile("740/850", "USA", "20%", age=110, cards=3, accounts=7, delinquencies=0),
        _profile("650/900", "Canada", "23.5%", age=64, cards=2, accounts=5, delinquencies=1),
    ]
    stats = aggregate_statistics(profiles)
    assert stats.profile_count == 2
    assert stats.total_history_months == 174
    assert stats.total_accounts == 12
    assert stats.total_cards == 5
    assert stats.total_delinquencies == 1
    assert stats.average_utilization_percent == pytest.approx(21.75, abs=0.01)
    assert stats.distinct_countries == ("USA", "Canada")
    assert stats.global_score == 80
    assert stats.to_dict()["distinctCountries"] == ["USA", "Canada"]


def test_aggregate_statistics_empty():
    stats = aggregate_statistics([])
    assert stats.profile_count == 0
    assert stats.total_history_months == 0
    assert stats.average_utilization_percent is None
    assert stats.distinct_countries == ()


def test_aggregation_is_pure():
    profiles = [_profile("740/850"), _profile("650/900")]
    assert aggregate_statistics(profiles) == aggregate_statistics(profiles)


def test_format_history_duration():
    assert format_history_duration(0) == "0 mo"
    assert format_history_duration(11) == "11 mo"
    assert format_history_duration(12) == "1.0 yr"
    assert format_history_duration(30) == "2.5 yr"


def test_format_utilization():
    assert format_utilization(21.75) == "21.8%"
    assert format_utilization(None) == "—"


def test_country_flag():
    assert country_flag("Canada") == "🇨🇦"
    assert country_flag("Atlantis") == UNKNOWN_COUNTRY_FLAG


def test_dashboard_summary():
    profiles = [_profile("740/850", "USA", ts=10), _profile("650/900", "Canada", ts=20)]
    summary = dashboard_summary(profiles)
    assert summary["statistics"]["globalScore"] == 80
    assert summary["display"]["globalScore"] == "80"
    assert summary["display"]["countryFlags"] == ["🇺🇸", "🇨🇦"]
    assert summary["profiles"][1] == {"country": "Canada", "flag": "🇨🇦", "score": "650/900", "timestamp": 20}


def test_dashboard_summary_empty():
    summary = dashboard_summary([])
    assert summary["display"]["globalScore"] == "—"
    assert summary["display"]["creditHistory"] == "0 mo"
    assert summary["profiles"] == []


def test_average_utilization_reference_values():
    profiles = [_profile(utilization="28%"), _profile(utilization="not available"), _profile(utilization="15.5%")]
    assert average_utilization(profiles) == pytest.approx(21.75, abs=0.01)


def test_negative_utilization_is_ignored():
    assert parse_utilization_percent("-5%") is None
    profiles = [_profile(utilization="-5%"), _profile(utilization="30%")]
    assert average_utilization(profiles) == 30.0
