"""Unit tests for daily quiz streaks (quizhub/gamification/streak_system.py)"""
from datetime import date, datetime, timedelta, timezone

from quizhub.gamification.streak_system import (
    calculate_best_streak,
    calculate_current_streak,
    resolve_current_streak,
)

TODAY = date(2026, 10, 19)


def _days_ago(*offsets):
    return [datetime.combine(TODAY - timedelta(days=n), datetime.min.time(), tzinfo=timezone.utc)
            for n in offsets]


def test_current_streak_ending_today():
    assert calculate_current_streak(_days_ago(0, 1, 2), today=TODAY) == 3


def test_current_streak_alive_through_yesterday():
    """Not having quizzed yet today does not break the streak"""
    assert calculate_current_streak(_days_ago(1, 2), today=TODAY) == 2


def test_current_streak_broken_by_gap():
    assert calculate_current_streak(_days_ago(2, 3, 4), today=TODAY) == 0


def test_current_streak_stops_at_first_gap():
    assert calculate_current_streak(_days_ago(0, 1, 3, 4, 5), today=TODAY) == 2


def test_current_streak_counts_days_not_attempts():
    times = _days_ago(0, 0, 0, 1)
    assert calculate_current_streak(times, today=TODAY) == 2


def test_current_streak_empty_history():
    assert calculate_current_streak([], today=TODAY) == 0


def test_current_streak_uses_utc_day():
    """A late-evening attempt west of UTC falls on the next UTC day"""
    evening = datetime(2026, 10, 18, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert calculate_current_streak([evening], today=TODAY) == 1
    assert calculate_current_streak([evening], today=TODAY + timedelta(days=2)) == 0


def test_best_streak():
    assert calculate_best_streak(_days_ago(0, 1, 3, 4, 5, 9)) == 3


def test_best_streak_empty_history():
    assert calculate_best_streak([]) == 0


def test_resolve_streak_prefers_profile_value():
    assert resolve_current_streak(12, _days_ago(0), today=TODAY) == 12


def test_resolve_streak_falls_back_to_history():
    assert resolve_current_streak(None, _days_ago(0, 1), today=TODAY) == 2


def test_resolve_streak_ignores_invalid_profile_value():
    assert resolve_current_streak("many", _days_ago(0), today=TODAY) == 1


def test_resolve_streak_clamps_negative_profile_value():
    assert resolve_current_streak(-3, [], today=TODAY) == 0
