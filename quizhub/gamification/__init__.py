"""
Gamification engine for QuizHub

Pipeline for one user:
    quiz history -> aggregated stats -> achievement states -> badge states
                 -> persisted state + notifications
"""

from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog
from quizhub.gamification.progress import aggregate_stats, compute_user_stats
from quizhub.gamification.achievement_system import (
    check_and_update_achievements,
    evaluate_achievements,
    get_user_achievements,
)
from quizhub.gamification.badge_system import (
    check_and_update_badges,
    evaluate_badges,
    get_user_badges,
)
from quizhub.gamification.notifications import (
    create_achievement_notifications,
    create_badge_notifications,
)

__all__ = [
    "DEFAULT_CATALOG",
    "Catalog",
    "aggregate_stats",
    "compute_user_stats",
    "check_and_update_achievements",
    "evaluate_achievements",
    "get_user_achievements",
    "check_and_update_badges",
    "evaluate_badges",
    "get_user_badges",
    "create_achievement_notifications",
    "create_badge_notifications",
]
