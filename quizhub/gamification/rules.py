"""
Achievement and badge rules

An achievement rule maps aggregated quiz statistics (plus the evaluation
context) to ``(raw_progress, should_unlock)``. A badge rule maps the user's
achievement states to a boolean. Rules are plain functions so each one can be
tested on its own; the catalog wires them to definition ids.
"""

from typing import Callable, Mapping

from quizhub.models.achievement import (
    AggregatedStats,
    EvaluationContext,
    UserAchievementState,
)

AchievementRule = Callable[[AggregatedStats, EvaluationContext], tuple[float, bool]]
BadgeRule = Callable[[Mapping[str, UserAchievementState]], bool]


# ============================================
# Achievement rules
# ============================================

def quiz_count(threshold: int) -> AchievementRule:
    """Unlock after completing `threshold` quizzes"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.total_quizzes, stats.total_quizzes >= threshold
    return rule


def highest_score(threshold: float) -> AchievementRule:
    """Unlock when any single attempt scores at least `threshold`"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.highest_score, stats.highest_score >= threshold
    return rule


def average_score(threshold: float) -> AchievementRule:
    """Unlock when the average score across all attempts reaches `threshold`"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.average_score, stats.average_score >= threshold
    return rule


def accuracy(threshold: float) -> AchievementRule:
    """Unlock when overall answer accuracy reaches `threshold` percent"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.accuracy, stats.accuracy >= threshold
    return rule


def fast_finish(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
    """Unlock once any quiz is finished under the speed threshold"""
    has_fast_quiz = stats.fast_quizzes > 0
    return (1 if has_fast_quiz else 0), has_fast_quiz


def efficient_quizzes(threshold: int) -> AchievementRule:
    """Unlock after `threshold` quizzes finished well under the average time"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.efficient_quizzes, stats.efficient_quizzes >= threshold
    return rule


def streak_length(threshold: int) -> AchievementRule:
    """Unlock when the current daily streak reaches `threshold` days"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return context.current_streak, context.current_streak >= threshold
    return rule


def distinct_subjects(threshold: int) -> AchievementRule:
    """Unlock after quizzes in `threshold` different subjects"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return stats.distinct_subjects, stats.distinct_subjects >= threshold
    return rule


def notes_uploaded(threshold: int) -> AchievementRule:
    """Unlock after `threshold` study-note uploads"""
    def rule(stats: AggregatedStats, context: EvaluationContext) -> tuple[float, bool]:
        return context.notes_uploaded, context.notes_uploaded >= threshold
    return rule


# ============================================
# Badge rules
# ============================================

def achievement_unlocked(achievement_id: str) -> BadgeRule:
    """Badge unlocks iff the named achievement is unlocked"""
    def rule(achievements: Mapping[str, UserAchievementState]) -> bool:
        state = achievements.get(achievement_id)
        return bool(state and state.unlocked)
    return rule


def achievement_progress_at_least(achievement_id: str, value: float) -> BadgeRule:
    """Badge condition on the progress of an achievement, locked or not"""
    def rule(achievements: Mapping[str, UserAchievementState]) -> bool:
        state = achievements.get(achievement_id)
        return bool(state and state.progress >= value)
    return rule


def all_of(*rules: BadgeRule) -> BadgeRule:
    """Badge unlocks only when every rule holds"""
    def rule(achievements: Mapping[str, UserAchievementState]) -> bool:
        return all(r(achievements) for r in rules)
    return rule
