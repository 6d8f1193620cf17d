"""
Service Layer Package

Business logic between the HTTP layer and the document store queries.

- GamificationService: quiz completion pipeline, achievements, badges,
  dashboard, leaderboard, notifications
"""

from quizhub.services.container import ServiceContainer, get_container, init_container
from quizhub.services.gamification_service import GamificationService, QuizCompletionResult

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "GamificationService",
    "QuizCompletionResult",
]
