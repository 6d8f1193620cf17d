"""Pydantic models for API request/response validation"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime

from quizhub.gamification.leaderboard import LeaderboardEntry
from quizhub.models.achievement import (
    AchievementReward,
    AchievementView,
    AggregatedStats,
    BadgeView,
    Notification,
)
from quizhub.models.quiz import QuizAttempt


class AchievementItem(BaseModel):
    """Achievement definition merged with the user's progress"""
    id: str
    title: str
    description: str
    icon: str
    category: str
    rarity: str
    points: int
    max_progress: float
    requirements: List[str]
    rewards: Optional[AchievementReward] = None
    progress: float
    unlocked: bool
    unlocked_at: Optional[datetime] = None

    @classmethod
    def from_view(cls, view: AchievementView) -> "AchievementItem":
        definition, state = view.definition, view.state
        return cls(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            category=definition.category.value,
            rarity=definition.rarity.value,
            points=definition.points,
            max_progress=definition.max_progress,
            requirements=list(definition.requirements),
            rewards=definition.rewards,
            progress=state.progress,
            unlocked=state.unlocked,
            unlocked_at=state.unlocked_at,
        )


class BadgeItem(BaseModel):
    """Badge definition merged with the user's unlock state"""
    id: str
    name: str
    description: str
    rarity: str
    category: str
    image_path: Optional[str] = None
    color: str
    unlocked: bool
    unlocked_at: Optional[datetime] = None

    @classmethod
    def from_view(cls, view: BadgeView) -> "BadgeItem":
        definition, state = view.definition, view.state
        return cls(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            rarity=definition.rarity.value,
            category=definition.category.value,
            image_path=definition.image_path,
            color=definition.color,
            unlocked=state.unlocked,
            unlocked_at=state.unlocked_at,
        )


class QuizCompletionResponse(BaseModel):
    """Outcome of submitting a quiz attempt or refreshing progress"""
    user_id: str
    attempt_id: Optional[str] = None
    total_points: int
    newly_unlocked_achievements: List[AchievementItem]
    newly_unlocked_badges: List[BadgeItem]
    notifications_delivered: int = Field(..., description="Notifications written")
    notifications_failed: int = Field(..., description="Notification writes that failed")


class QuizHistoryResponse(BaseModel):
    user_id: str
    attempts: List[QuizAttempt]


class StatsResponse(BaseModel):
    user_id: str
    stats: AggregatedStats


class AchievementListResponse(BaseModel):
    user_id: str
    achievements: List[AchievementItem]
    total_achievements: int
    total_unlocked: int
    completion_percentage: int
    total_points: int


class BadgeListResponse(BaseModel):
    user_id: str
    badges: List[BadgeItem]
    total_badges: int
    total_unlocked: int


class DashboardResponse(BaseModel):
    user_id: str
    stats: AggregatedStats
    recent_attempts: List[QuizAttempt]
    achievements: Dict[str, Any]
    badges: Dict[str, Any]
    total_points: int
    current_streak: int
    best_streak: int


class NotificationListResponse(BaseModel):
    user_id: str
    notifications: List[Notification]
    unread_count: int


class MarkAllReadResponse(BaseModel):
    user_id: str
    updated: int


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntry]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    store: str
    timestamp: datetime

