"""Achievement, badge and notification models for gamification"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone


class AchievementCategory(str, Enum):
    """Achievement categories"""
    PARTICIPATION = "participation"
    PERFORMANCE = "performance"
    EFFICIENCY = "efficiency"
    CONSISTENCY = "consistency"
    SPECIAL = "special"


class BadgeCategory(str, Enum):
    """Badge categories (achievement categories plus mastery series)"""
    PARTICIPATION = "participation"
    PERFORMANCE = "performance"
    EFFICIENCY = "efficiency"
    CONSISTENCY = "consistency"
    SPECIAL = "special"
    MASTERY = "mastery"


class Rarity(str, Enum):
    """How hard an achievement or badge is to get"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class NotificationType(str, Enum):
    ACHIEVEMENT = "achievement"
    BADGE = "badge"


class AchievementReward(BaseModel):
    """What unlocking an achievement grants"""
    model_config = ConfigDict(frozen=True)

    points: Optional[int] = None
    title: Optional[str] = None
    special: Optional[str] = None


class AchievementDefinition(BaseModel):
    """Static achievement definition"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    icon: str
    category: AchievementCategory
    rarity: Rarity
    points: int
    max_progress: float
    requirements: tuple[str, ...] = ()
    rewards: Optional[AchievementReward] = None


class BadgeDefinition(BaseModel):
    """Static badge definition"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    rarity: Rarity
    category: BadgeCategory
    image_path: Optional[str] = None
    color: str = "bg-blue-500"


class UserAchievementState(BaseModel):
    """A user's progress toward one achievement"""
    id: str
    progress: float = 0
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


class UserBadgeState(BaseModel):
    """Whether a user holds one badge"""
    id: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


class AggregatedStats(BaseModel):
    """Quiz statistics recomputed from the full attempt history"""
    total_quizzes: int = 0
    average_score: float = 0.0
    highest_score: float = 0.0
    total_time: float = 0.0
    average_time: float = 0.0
    total_questions: int = 0
    correct_answers: int = 0
    accuracy: float = 0.0
    fast_quizzes: int = 0  # Attempts under the speed threshold
    efficient_quizzes: int = 0  # Attempts under 80% of the average time
    distinct_subjects: int = 0


class EvaluationContext(BaseModel):
    """Facts about the user that do not come from quiz history"""
    current_streak: int = 0
    notes_uploaded: int = 0


class Notification(BaseModel):
    """Notification record stored under users/{uid}/notifications"""
    id: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    icon: Optional[str] = None
    rarity: Rarity
    points: Optional[int] = None
    color: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False


class AchievementView(BaseModel):
    """Achievement definition joined with the user's state, for display"""
    definition: AchievementDefinition
    state: UserAchievementState


class BadgeView(BaseModel):
    """Badge definition joined with the user's state, for display"""
    definition: BadgeDefinition
    state: UserBadgeState
