"""Unit tests for achievement and badge rules (quizhub/gamification/rules.py)"""
from quizhub.gamification import rules
from quizhub.models.achievement import (
    AggregatedStats,
    EvaluationContext,
    UserAchievementState,
)

NO_CONTEXT = EvaluationContext()


# ============================================================================
# Achievement Rule Tests
# ============================================================================

def test_quiz_count_rule():
    rule = rules.quiz_count(5)

    assert rule(AggregatedStats(total_quizzes=3), NO_CONTEXT) == (3, False)
    assert rule(AggregatedStats(total_quizzes=5), NO_CONTEXT) == (5, True)


def test_highest_score_rule():
    rule = rules.highest_score(90)

    assert rule(AggregatedStats(highest_score=89.5), NO_CONTEXT) == (89.5, False)
    assert rule(AggregatedStats(highest_score=90), NO_CONTEXT) == (90, True)


def test_average_score_rule():
    rule = rules.average_score(80)

    assert rule(AggregatedStats(average_score=79.9), NO_CONTEXT)[1] is False
    assert rule(AggregatedStats(average_score=85), NO_CONTEXT) == (85, True)


def test_accuracy_rule():
    rule = rules.accuracy(95)

    assert rule(AggregatedStats(accuracy=94), NO_CONTEXT) == (94, False)
    assert rule(AggregatedStats(accuracy=95), NO_CONTEXT) == (95, True)


def test_fast_finish_rule():
    assert rules.fast_finish(AggregatedStats(), NO_CONTEXT) == (0, False)
    assert rules.fast_finish(AggregatedStats(fast_quizzes=3), NO_CONTEXT) == (1, True)


def test_efficient_quizzes_rule():
    rule = rules.efficient_quizzes(10)

    assert rule(AggregatedStats(efficient_quizzes=9), NO_CONTEXT) == (9, False)
    assert rule(AggregatedStats(efficient_quizzes=10), NO_CONTEXT) == (10, True)


def test_streak_length_rule_reads_context():
    rule = rules.streak_length(7)

    assert rule(AggregatedStats(total_quizzes=50), EvaluationContext(current_streak=6)) == (6, False)
    assert rule(AggregatedStats(), EvaluationContext(current_streak=7)) == (7, True)


def test_distinct_subjects_rule():
    rule = rules.distinct_subjects(5)

    assert rule(AggregatedStats(distinct_subjects=4), NO_CONTEXT) == (4, False)
    assert rule(AggregatedStats(distinct_subjects=6), NO_CONTEXT) == (6, True)


def test_notes_uploaded_rule():
    rule = rules.notes_uploaded(1)

    assert rule(AggregatedStats(), NO_CONTEXT) == (0, False)
    assert rule(AggregatedStats(), EvaluationContext(notes_uploaded=2)) == (2, True)


# ============================================================================
# Badge Rule Tests
# ============================================================================

def test_achievement_unlocked_rule():
    rule = rules.achievement_unlocked("first-quiz")

    assert rule({}) is False
    assert rule({"first-quiz": UserAchievementState(id="first-quiz", progress=1)}) is False
    assert rule({"first-quiz": UserAchievementState(id="first-quiz", progress=1, unlocked=True)}) is True


def test_achievement_progress_rule_ignores_lock_state():
    rule = rules.achievement_progress_at_least("quiz-legend", 50)

    assert rule({"quiz-legend": UserAchievementState(id="quiz-legend", progress=49)}) is False
    assert rule({"quiz-legend": UserAchievementState(id="quiz-legend", progress=50)}) is True


def test_all_of_rule():
    rule = rules.all_of(
        rules.achievement_unlocked("quiz-master"),
        rules.achievement_progress_at_least("quiz-legend", 50),
    )
    master = UserAchievementState(id="quiz-master", progress=25, unlocked=True)

    assert rule({"quiz-master": master}) is False
    assert rule({
        "quiz-master": master,
        "quiz-legend": UserAchievementState(id="quiz-legend", progress=60),
    }) is True
