"""Unit tests for quiz statistics (quizhub/gamification/progress.py)"""
import pytest

from quizhub.db.queries import record_quiz_attempt
from quizhub.gamification.progress import (
    aggregate_stats,
    compute_user_stats,
    extract_subject,
)
from quizhub.models.achievement import AggregatedStats


# ============================================================================
# Aggregation Tests
# ============================================================================

def test_aggregate_stats_empty_history():
    """No attempts means every statistic is zero, with no division errors"""
    stats = aggregate_stats([])

    assert stats == AggregatedStats()
    assert stats.total_quizzes == 0
    assert stats.average_score == 0
    assert stats.accuracy == 0


def test_aggregate_stats_mixed_history(make_attempt):
    history = [
        make_attempt(score=80, total_questions=10, correct_answers=8, time_taken=120, quiz_title="Math Basics"),
        make_attempt(score=100, total_questions=10, correct_answers=10, time_taken=400, subject="Physics"),
        make_attempt(score=60, total_questions=5, correct_answers=3, time_taken=200, quiz_title=""),
    ]

    stats = aggregate_stats(history, speed_threshold=300)

    assert stats.total_quizzes == 3
    assert stats.average_score == pytest.approx(80)
    assert stats.highest_score == 100
    assert stats.total_time == 720
    assert stats.average_time == pytest.approx(240)
    assert stats.total_questions == 25
    assert stats.correct_answers == 21
    assert stats.accuracy == pytest.approx(84.0)
    assert stats.fast_quizzes == 2  # 120s and 200s
    assert stats.efficient_quizzes == 1  # only 120s beats 80% of 240s
    assert stats.distinct_subjects == 2  # "math" and "physics"; empty title counts nothing


def test_aggregate_stats_zero_questions(make_attempt):
    """Attempts without questions leave accuracy at zero"""
    stats = aggregate_stats([make_attempt(total_questions=0, correct_answers=0)])

    assert stats.total_quizzes == 1
    assert stats.accuracy == 0


def test_aggregate_stats_respects_speed_threshold(make_attempt):
    history = [make_attempt(time_taken=250)]

    assert aggregate_stats(history, speed_threshold=300).fast_quizzes == 1
    assert aggregate_stats(history, speed_threshold=200).fast_quizzes == 0


def test_aggregate_stats_subjects_are_case_insensitive(make_attempt):
    history = [
        make_attempt(quiz_title="Chemistry 101"),
        make_attempt(quiz_title="chemistry quiz"),
        make_attempt(subject="CHEMISTRY"),
    ]

    assert aggregate_stats(history).distinct_subjects == 1


# ============================================================================
# Subject Extraction Tests
# ============================================================================

def test_extract_subject_prefers_explicit_subject(make_attempt):
    assert extract_subject(make_attempt(subject=" History ", quiz_title="Math Basics")) == "history"


def test_extract_subject_falls_back_to_title(make_attempt):
    assert extract_subject(make_attempt(quiz_title="Biology Cells")) == "biology"


def test_extract_subject_empty_title(make_attempt):
    assert extract_subject(make_attempt(quiz_title="   ")) is None


# ============================================================================
# Store-backed Tests
# ============================================================================

@pytest.mark.asyncio
async def test_compute_user_stats_reads_history(store, test_user_id, make_attempt):
    await record_quiz_attempt(store, test_user_id, make_attempt(score=90))
    await record_quiz_attempt(store, test_user_id, make_attempt(score=50))

    stats = await compute_user_stats(store, test_user_id)

    assert stats.total_quizzes == 2
    assert stats.average_score == pytest.approx(70)
    assert stats.highest_score == 90


@pytest.mark.asyncio
async def test_compute_user_stats_unknown_user(store):
    stats = await compute_user_stats(store, "nobody")

    assert stats.total_quizzes == 0
