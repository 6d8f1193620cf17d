"""
Daily Quiz Streaks

A streak is the number of consecutive calendar days (UTC) with at least one
completed quiz. The current streak stays alive through the day after the last
quiz; a longer gap resets it.

The user profile may carry an explicit `streak` value maintained elsewhere.
When it does, that value wins; otherwise the streak is derived from the
attempt history.
"""

from typing import Iterable, Optional, Union
from datetime import date, datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)


def _to_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def _distinct_days(completion_times: Iterable[Union[date, datetime]]) -> list[date]:
    return sorted({_to_date(t) for t in completion_times}, reverse=True)


def calculate_current_streak(
    completion_times: Iterable[Union[date, datetime]],
    today: Optional[date] = None
) -> int:
    """
    Count consecutive quiz days ending today or yesterday

    Args:
        completion_times: Completion dates/datetimes of quiz attempts
        today: Reference date (defaults to the current UTC date)

    Returns:
        Current streak length in days (0 if the streak is broken)
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    days = _distinct_days(completion_times)
    if not days:
        return 0

    # Streak survives until the end of the day after the last quiz
    if days[0] < today - timedelta(days=1):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current == timedelta(days=1):
            streak += 1
        else:
            break
    return streak


def calculate_best_streak(completion_times: Iterable[Union[date, datetime]]) -> int:
    """Longest run of consecutive quiz days in the history"""
    days = sorted(_distinct_days(completion_times))
    if not days:
        return 0

    best = current = 1
    for previous, day in zip(days, days[1:]):
        if day - previous == timedelta(days=1):
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def resolve_current_streak(
    profile_streak: Optional[int],
    completion_times: Iterable[Union[date, datetime]],
    today: Optional[date] = None
) -> int:
    """Profile streak when present, otherwise the streak derived from history"""
    if profile_streak is not None:
        try:
            return max(0, int(profile_streak))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid profile streak value: {profile_streak!r}")
    return calculate_current_streak(completion_times, today)
