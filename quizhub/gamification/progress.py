"""
Progress Aggregator

Derives quiz statistics from a user's attempt history. Statistics are never
stored on their own; they are recomputed from the full history on every
evaluation.
"""

from typing import Optional, Sequence
import logging

from quizhub.config import SPEED_THRESHOLD_SECONDS
from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import get_user_quiz_history
from quizhub.models.achievement import AggregatedStats
from quizhub.models.quiz import QuizAttempt

logger = logging.getLogger(__name__)

# An attempt is "efficient" when it beats this fraction of the average time
EFFICIENT_TIME_RATIO = 0.8


def extract_subject(attempt: QuizAttempt) -> Optional[str]:
    """
    Subject of an attempt

    Uses the explicit subject when the attempt has one. Otherwise falls back to
    the first word of the quiz title, which misses titles that do not start
    with the subject name ("Intro to Biology" counts as "intro").
    """
    if attempt.subject and attempt.subject.strip():
        return attempt.subject.strip().lower()

    words = attempt.quiz_title.split()
    return words[0].lower() if words else None


def aggregate_stats(
    history: Sequence[QuizAttempt],
    speed_threshold: float = SPEED_THRESHOLD_SECONDS
) -> AggregatedStats:
    """
    Compute aggregated statistics for a list of attempts

    Args:
        history: Quiz attempts (any order)
        speed_threshold: Seconds under which an attempt counts as fast

    Returns:
        AggregatedStats; every field is 0 for an empty history
    """
    total_quizzes = len(history)
    if total_quizzes == 0:
        return AggregatedStats()

    total_score = sum(a.score for a in history)
    total_time = sum(a.time_taken for a in history)
    total_questions = sum(a.total_questions for a in history)
    correct_answers = sum(a.correct_answers for a in history)

    average_time = total_time / total_quizzes
    accuracy = (correct_answers / total_questions) * 100 if total_questions > 0 else 0.0

    subjects = {s for s in (extract_subject(a) for a in history) if s}

    return AggregatedStats(
        total_quizzes=total_quizzes,
        average_score=total_score / total_quizzes,
        highest_score=max(a.score for a in history),
        total_time=total_time,
        average_time=average_time,
        total_questions=total_questions,
        correct_answers=correct_answers,
        accuracy=accuracy,
        fast_quizzes=sum(1 for a in history if a.time_taken < speed_threshold),
        efficient_quizzes=sum(
            1 for a in history if a.time_taken < average_time * EFFICIENT_TIME_RATIO
        ),
        distinct_subjects=len(subjects),
    )


async def compute_user_stats(store: DocumentStore, user_id: str) -> AggregatedStats:
    """
    Fetch a user's quiz history and aggregate it

    Data-access failures propagate; there is no retry.
    """
    history = await get_user_quiz_history(store, user_id)
    stats = aggregate_stats(history)
    logger.debug(
        f"Stats for user {user_id}: quizzes={stats.total_quizzes}, "
        f"avg={stats.average_score:.1f}, accuracy={stats.accuracy:.1f}"
    )
    return stats
