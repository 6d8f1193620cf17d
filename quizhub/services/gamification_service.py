"""
GamificationService - Quiz Completion Orchestration

Runs the achievement pipeline for a user and builds the read models the
client pages need (achievements, badges, dashboard, leaderboard,
notifications).
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import (
    get_notifications,
    get_user_document,
    get_user_quiz_history,
    mark_all_notifications_read,
    mark_notification_read,
    record_notes_upload,
    record_quiz_attempt,
)
from quizhub.gamification.achievement_system import (
    AchievementEvaluation,
    build_achievement_views,
    build_evaluation_context,
    check_and_update_achievements,
    default_achievement_states,
    filter_achievements,
    get_user_achievements,
    load_achievement_states,
    summarize_achievements,
)
from quizhub.gamification.badge_system import (
    BadgeEvaluation,
    build_badge_views,
    check_and_update_badges,
    default_badge_states,
    filter_badges,
    get_user_badges,
    load_badge_states,
    summarize_badges,
)
from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog
from quizhub.gamification.leaderboard import LeaderboardEntry, get_leaderboard
from quizhub.gamification.notifications import (
    NotificationReport,
    create_achievement_notifications,
    create_badge_notifications,
)
from quizhub.gamification.progress import aggregate_stats, compute_user_stats
from quizhub.gamification.streak_system import calculate_best_streak
from quizhub.models.achievement import AchievementView, AggregatedStats, BadgeView, Notification
from quizhub.models.quiz import QuizAttempt

logger = logging.getLogger(__name__)

RECENT_ATTEMPTS_LIMIT = 5


@dataclass
class QuizCompletionResult:
    """Combined outcome of one quiz-completion run"""
    achievements: AchievementEvaluation
    badges: BadgeEvaluation
    total_points: int
    notifications: NotificationReport = field(default_factory=NotificationReport)


class GamificationService:
    """
    Service for quiz gamification.

    Responsibilities:
    - Recording quiz attempts
    - Achievement and badge evaluation after each attempt
    - Unlock notifications
    - Achievement, badge, dashboard and leaderboard views
    """

    def __init__(self, store: DocumentStore, catalog: Catalog = DEFAULT_CATALOG):
        """
        Initialize GamificationService.

        Args:
            store: Document store holding all per-user state
            catalog: Achievement and badge definitions with their rules
        """
        self.store = store
        self.catalog = catalog
        logger.debug("GamificationService initialized")

    async def submit_quiz_attempt(self, user_id: str, attempt: QuizAttempt) -> QuizCompletionResult:
        """Record a completed attempt, then run the completion pipeline"""
        await record_quiz_attempt(self.store, user_id, attempt)
        return await self.process_quiz_completion(user_id, attempt)

    async def process_quiz_completion(
        self,
        user_id: str,
        attempt: Optional[QuizAttempt] = None
    ) -> QuizCompletionResult:
        """
        Run achievements, then badges, then notifications for a user.

        Badges are evaluated against the achievement states computed in this
        call, so a badge unlocks in the same run as the achievement it
        depends on. Failures in either evaluation propagate; notification
        failures are logged and reported but never fail the run.

        Args:
            user_id: User ID
            attempt: The attempt that triggered the run, if any (logging only)

        Returns:
            QuizCompletionResult
        """
        achievement_result = await check_and_update_achievements(self.store, user_id, self.catalog)
        badge_result = await check_and_update_badges(
            self.store, user_id, achievement_result.achievements, self.catalog
        )

        notifications = NotificationReport()
        if achievement_result.newly_unlocked:
            notifications = notifications.merge(
                await create_achievement_notifications(self.store, user_id, achievement_result.newly_unlocked)
            )
        if badge_result.newly_unlocked:
            notifications = notifications.merge(
                await create_badge_notifications(self.store, user_id, badge_result.newly_unlocked)
            )

        logger.info(
            f"Quiz completion processed: user={user_id}, "
            f"attempt={attempt.id if attempt else None}, "
            f"achievements_unlocked={len(achievement_result.newly_unlocked)}, "
            f"badges_unlocked={len(badge_result.newly_unlocked)}, "
            f"points={achievement_result.total_points}"
        )

        return QuizCompletionResult(
            achievements=achievement_result,
            badges=badge_result,
            total_points=achievement_result.total_points,
            notifications=notifications,
        )

    async def record_notes_upload(self, user_id: str) -> QuizCompletionResult:
        """Count a study-notes upload and re-run evaluation (community achievements)"""
        await record_notes_upload(self.store, user_id)
        return await self.process_quiz_completion(user_id)

    async def get_stats(self, user_id: str) -> AggregatedStats:
        return await compute_user_stats(self.store, user_id)

    async def get_achievements(
        self,
        user_id: str,
        search: Optional[str] = None,
        category: Optional[str] = None,
        rarity: Optional[str] = None
    ) -> tuple[list[AchievementView], dict[str, Any]]:
        """Filtered achievement views plus the unfiltered summary"""
        states = await get_user_achievements(self.store, user_id, self.catalog)
        views = filter_achievements(build_achievement_views(states, self.catalog), search, category, rarity)
        return views, summarize_achievements(states, self.catalog)

    async def get_badges(
        self,
        user_id: str,
        search: Optional[str] = None,
        category: Optional[str] = None,
        rarity: Optional[str] = None
    ) -> tuple[list[BadgeView], dict[str, int]]:
        """Filtered badge views plus the unfiltered summary"""
        states = await get_user_badges(self.store, user_id, self.catalog)
        views = filter_badges(build_badge_views(states, self.catalog), search, category, rarity)
        return views, summarize_badges(states, self.catalog)

    async def get_quiz_history(self, user_id: str) -> list[QuizAttempt]:
        return await get_user_quiz_history(self.store, user_id)

    async def get_dashboard(self, user_id: str) -> dict[str, Any]:
        """
        Dashboard overview built from stored state (read-only)

        Returns:
            {
                'stats': AggregatedStats,
                'recent_attempts': list[QuizAttempt],
                'achievements': achievement summary dict,
                'badges': badge summary dict,
                'total_points': int,
                'current_streak': int,
                'best_streak': int
            }
        """
        user_data, history = await asyncio.gather(
            get_user_document(self.store, user_id),
            get_user_quiz_history(self.store, user_id),
        )

        achievements = load_achievement_states(user_data, self.catalog) or default_achievement_states(self.catalog)
        badges = load_badge_states(user_data) or default_badge_states(self.catalog)
        context = build_evaluation_context(user_data, history)
        achievement_summary = summarize_achievements(achievements, self.catalog)

        return {
            'stats': aggregate_stats(history),
            'recent_attempts': history[:RECENT_ATTEMPTS_LIMIT],
            'achievements': achievement_summary,
            'badges': summarize_badges(badges, self.catalog),
            'total_points': achievement_summary['total_points'],
            'current_streak': context.current_streak,
            'best_streak': calculate_best_streak(a.completed_at for a in history),
        }

    async def get_leaderboard(self, limit: int) -> list[LeaderboardEntry]:
        return await get_leaderboard(self.store, limit, self.catalog)

    async def get_notifications(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        return await get_notifications(self.store, user_id, unread_only=unread_only)

    async def mark_notification_read(self, user_id: str, notification_id: str) -> None:
        await mark_notification_read(self.store, user_id, notification_id)

    async def mark_all_notifications_read(self, user_id: str) -> int:
        return await mark_all_notifications_read(self.store, user_id)
