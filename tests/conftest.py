"""Global test fixtures and utilities for QuizHub tests"""
import pytest
from datetime import datetime, timezone

from quizhub.db.document_store import InMemoryDocumentStore
from quizhub.gamification.catalog import DEFAULT_CATALOG
from quizhub.models.quiz import QuizAttempt
from quizhub.services.gamification_service import GamificationService


# ============================================================================
# Store & Service Fixtures
# ============================================================================

@pytest.fixture
def store():
    """Fresh in-memory document store"""
    return InMemoryDocumentStore()


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def gamification_service(store, catalog):
    """GamificationService backed by the in-memory store"""
    return GamificationService(store, catalog)


# ============================================================================
# User & Quiz Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def make_attempt():
    """Factory for quiz attempts with sensible defaults"""
    def _make_attempt(**overrides) -> QuizAttempt:
        data = {
            "quiz_id": "quiz-1",
            "quiz_title": "Biology Basics",
            "score": 70,
            "total_questions": 10,
            "correct_answers": 7,
            "time_taken": 600,
            "completed_at": datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return QuizAttempt(**data)
    return _make_attempt
