"""
Achievement and badge catalog

Definitions are frozen and grouped with their rule tables in a Catalog, which
is passed into the evaluators. DEFAULT_CATALOG is the catalog the platform
ships with; tests and callers may build their own.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from quizhub.gamification import rules
from quizhub.gamification.rules import AchievementRule, BadgeRule
from quizhub.models.achievement import (
    AchievementCategory,
    AchievementDefinition,
    AchievementReward,
    BadgeCategory,
    BadgeDefinition,
    Rarity,
)


@dataclass(frozen=True)
class Catalog:
    """Immutable set of definitions plus the rule for each definition id"""
    achievements: tuple[AchievementDefinition, ...]
    badges: tuple[BadgeDefinition, ...]
    achievement_rules: Mapping[str, AchievementRule] = field(default_factory=dict)
    badge_rules: Mapping[str, BadgeRule] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the rule tables so a shared catalog cannot be edited in place
        object.__setattr__(self, "achievement_rules", MappingProxyType(dict(self.achievement_rules)))
        object.__setattr__(self, "badge_rules", MappingProxyType(dict(self.badge_rules)))

    def get_achievement(self, achievement_id: str) -> Optional[AchievementDefinition]:
        return next((a for a in self.achievements if a.id == achievement_id), None)

    def get_badge(self, badge_id: str) -> Optional[BadgeDefinition]:
        return next((b for b in self.badges if b.id == badge_id), None)


ACHIEVEMENT_DEFINITIONS: tuple[AchievementDefinition, ...] = (
    # Participation
    AchievementDefinition(
        id="first-quiz",
        title="First Steps",
        description="Complete your first quiz",
        icon="🎯",
        category=AchievementCategory.PARTICIPATION,
        rarity=Rarity.COMMON,
        points=10,
        max_progress=1,
        requirements=("Complete 1 quiz",),
        rewards=AchievementReward(points=10, title="Novice"),
    ),
    AchievementDefinition(
        id="quiz-enthusiast",
        title="Quiz Enthusiast",
        description="Complete 5 quizzes",
        icon="📚",
        category=AchievementCategory.PARTICIPATION,
        rarity=Rarity.COMMON,
        points=25,
        max_progress=5,
        requirements=("Complete 5 quizzes",),
        rewards=AchievementReward(points=25, title="Enthusiast"),
    ),
    AchievementDefinition(
        id="quiz-master",
        title="Quiz Master",
        description="Complete 25 quizzes",
        icon="🏆",
        category=AchievementCategory.PARTICIPATION,
        rarity=Rarity.RARE,
        points=100,
        max_progress=25,
        requirements=("Complete 25 quizzes",),
        rewards=AchievementReward(points=100, title="Master"),
    ),
    AchievementDefinition(
        id="quiz-legend",
        title="Quiz Legend",
        description="Complete 100 quizzes",
        icon="👑",
        category=AchievementCategory.PARTICIPATION,
        rarity=Rarity.LEGENDARY,
        points=500,
        max_progress=100,
        requirements=("Complete 100 quizzes",),
        rewards=AchievementReward(points=500, title="Legend", special="Exclusive profile badge"),
    ),

    # Performance
    AchievementDefinition(
        id="high-scorer",
        title="High Scorer",
        description="Achieve 90% or higher on any quiz",
        icon="⭐",
        category=AchievementCategory.PERFORMANCE,
        rarity=Rarity.RARE,
        points=50,
        max_progress=90,
        requirements=("Score 90% or higher on any quiz",),
        rewards=AchievementReward(points=50, title="High Scorer"),
    ),
    AchievementDefinition(
        id="perfect-score",
        title="Perfect Score",
        description="Get 100% on any quiz",
        icon="💎",
        category=AchievementCategory.PERFORMANCE,
        rarity=Rarity.EPIC,
        points=200,
        max_progress=100,
        requirements=("Score 100% on any quiz",),
        rewards=AchievementReward(points=200, title="Perfect", special="Golden profile frame"),
    ),
    AchievementDefinition(
        id="consistent",
        title="Consistent Performer",
        description="Maintain 80% average score",
        icon="📈",
        category=AchievementCategory.PERFORMANCE,
        rarity=Rarity.RARE,
        points=75,
        max_progress=80,
        requirements=("Maintain 80% average score",),
        rewards=AchievementReward(points=75, title="Consistent"),
    ),
    AchievementDefinition(
        id="accuracy-expert",
        title="Accuracy Expert",
        description="Maintain 95% accuracy across all quizzes",
        icon="🎯",
        category=AchievementCategory.PERFORMANCE,
        rarity=Rarity.EPIC,
        points=150,
        max_progress=95,
        requirements=("Maintain 95% accuracy",),
        rewards=AchievementReward(points=150, title="Accuracy Expert"),
    ),

    # Efficiency
    AchievementDefinition(
        id="speed-demon",
        title="Speed Demon",
        description="Complete a quiz in under 5 minutes",
        icon="⚡",
        category=AchievementCategory.EFFICIENCY,
        rarity=Rarity.RARE,
        points=50,
        max_progress=1,
        requirements=("Complete a quiz in under 5 minutes",),
        rewards=AchievementReward(points=50, title="Speed Demon"),
    ),
    AchievementDefinition(
        id="time-master",
        title="Time Master",
        description="Complete 10 quizzes with excellent time management",
        icon="⏱️",
        category=AchievementCategory.EFFICIENCY,
        rarity=Rarity.EPIC,
        points=100,
        max_progress=10,
        requirements=("Complete 10 quizzes efficiently",),
        rewards=AchievementReward(points=100, title="Time Master"),
    ),

    # Consistency
    AchievementDefinition(
        id="streak-master",
        title="Streak Master",
        description="Maintain a 7-day quiz streak",
        icon="🔥",
        category=AchievementCategory.CONSISTENCY,
        rarity=Rarity.RARE,
        points=75,
        max_progress=7,
        requirements=("Maintain 7-day quiz streak",),
        rewards=AchievementReward(points=75, title="Streak Master"),
    ),
    AchievementDefinition(
        id="daily-learner",
        title="Daily Learner",
        description="Complete quizzes for 30 consecutive days",
        icon="📅",
        category=AchievementCategory.CONSISTENCY,
        rarity=Rarity.LEGENDARY,
        points=300,
        max_progress=30,
        requirements=("Maintain 30-day quiz streak",),
        rewards=AchievementReward(points=300, title="Daily Learner", special="Exclusive learning path"),
    ),

    # Special
    AchievementDefinition(
        id="brain-booster",
        title="Brain Booster",
        description="Complete quizzes in 5 different subjects",
        icon="🧠",
        category=AchievementCategory.SPECIAL,
        rarity=Rarity.EPIC,
        points=125,
        max_progress=5,
        requirements=("Complete quizzes in 5 different subjects",),
        rewards=AchievementReward(points=125, title="Brain Booster"),
    ),
    AchievementDefinition(
        id="community-contributor",
        title="Community Contributor",
        description="Upload notes and help other learners",
        icon="🤝",
        category=AchievementCategory.SPECIAL,
        rarity=Rarity.RARE,
        points=75,
        max_progress=1,
        requirements=("Upload study notes",),
        rewards=AchievementReward(points=75, title="Contributor"),
    ),
)

ACHIEVEMENT_RULES: dict[str, AchievementRule] = {
    "first-quiz": rules.quiz_count(1),
    "quiz-enthusiast": rules.quiz_count(5),
    "quiz-master": rules.quiz_count(25),
    "quiz-legend": rules.quiz_count(100),
    "high-scorer": rules.highest_score(90),
    "perfect-score": rules.highest_score(100),
    "consistent": rules.average_score(80),
    "accuracy-expert": rules.accuracy(95),
    "speed-demon": rules.fast_finish,
    "time-master": rules.efficient_quizzes(10),
    "streak-master": rules.streak_length(7),
    "daily-learner": rules.streak_length(30),
    "brain-booster": rules.distinct_subjects(5),
    "community-contributor": rules.notes_uploaded(1),
}


BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    # Core
    BadgeDefinition(
        id="novice", name="Novice", description="Begin your learning journey",
        rarity=Rarity.COMMON, category=BadgeCategory.PARTICIPATION,
        image_path="/badges/Novice.svg", color="bg-blue-500",
    ),
    BadgeDefinition(
        id="enthusiast", name="Enthusiast", description="Completed 5 quizzes",
        rarity=Rarity.COMMON, category=BadgeCategory.PARTICIPATION,
        image_path="/badges/quiz-enthusiast.svg", color="bg-green-500",
    ),
    BadgeDefinition(
        id="quiz-enthusiast", name="Quiz Enthusiast", description="Complete 10 quizzes",
        rarity=Rarity.RARE, category=BadgeCategory.PARTICIPATION,
        image_path="/badges/quiz-enthusiast.svg", color="bg-pink-500",
    ),
    BadgeDefinition(
        id="quiz-master", name="Quiz Master", description="Complete 50 quizzes",
        rarity=Rarity.LEGENDARY, category=BadgeCategory.PARTICIPATION,
        image_path="/badges/quiz-master.svg", color="bg-purple-800",
    ),
    BadgeDefinition(
        id="quiz-legend", name="Quiz Legend", description="Complete 100 quizzes",
        rarity=Rarity.LEGENDARY, category=BadgeCategory.PARTICIPATION,
        image_path="/badges/quiz-legend.svg", color="bg-yellow-500",
    ),

    # Master series
    BadgeDefinition(
        id="quiz-master-1", name="Quiz Master I", description="Advanced quiz completion",
        rarity=Rarity.RARE, category=BadgeCategory.MASTERY,
        image_path="/badges/quiz-master-1.svg", color="bg-purple-500",
    ),
    BadgeDefinition(
        id="quiz-master-2", name="Quiz Master II", description="Expert quiz completion",
        rarity=Rarity.EPIC, category=BadgeCategory.MASTERY,
        image_path="/badges/quiz-master-2.svg", color="bg-yellow-500",
    ),
    BadgeDefinition(
        id="quiz-master-3", name="Quiz Master III", description="Legendary quiz completion",
        rarity=Rarity.LEGENDARY, category=BadgeCategory.MASTERY,
        image_path="/badges/quiz-master-3.svg", color="bg-red-500",
    ),

    # Performance
    BadgeDefinition(
        id="accuracy-expert", name="Accuracy Expert", description="95%+ accuracy on quizzes",
        rarity=Rarity.EPIC, category=BadgeCategory.PERFORMANCE,
        image_path="/badges/accuracy-expert.svg", color="bg-emerald-500",
    ),
    BadgeDefinition(
        id="consistent", name="Consistent", description="80%+ average score",
        rarity=Rarity.RARE, category=BadgeCategory.PERFORMANCE,
        image_path="/badges/consistent.svg", color="bg-indigo-500",
    ),
    BadgeDefinition(
        id="high-scorer", name="High Scorer", description="Achieve high scores consistently",
        rarity=Rarity.RARE, category=BadgeCategory.PERFORMANCE,
        image_path="/badges/high-scorer.svg", color="bg-yellow-500",
    ),
    BadgeDefinition(
        id="perfect-score", name="Perfect Score", description="Achieve 100% on a quiz",
        rarity=Rarity.EPIC, category=BadgeCategory.PERFORMANCE,
        image_path="/badges/perfect-score.svg", color="bg-purple-500",
    ),

    # Efficiency
    BadgeDefinition(
        id="speed-demon", name="Speed Demon", description="Fast quiz completion",
        rarity=Rarity.RARE, category=BadgeCategory.EFFICIENCY,
        image_path="/badges/speed-demon.svg", color="bg-orange-500",
    ),
    BadgeDefinition(
        id="time-master", name="Time Master", description="Excellent time management",
        rarity=Rarity.RARE, category=BadgeCategory.EFFICIENCY,
        image_path="/badges/time-master.svg", color="bg-blue-500",
    ),

    # Consistency
    BadgeDefinition(
        id="streak-master", name="Streak Master", description="Maintain learning streaks",
        rarity=Rarity.EPIC, category=BadgeCategory.CONSISTENCY,
        image_path="/badges/streak-master.svg", color="bg-red-500",
    ),
    BadgeDefinition(
        id="daily-learner", name="Daily Learner", description="Learn every day",
        rarity=Rarity.RARE, category=BadgeCategory.CONSISTENCY,
        image_path="/badges/daily-learner.svg", color="bg-green-500",
    ),

    # Special
    BadgeDefinition(
        id="first-steps", name="First Steps", description="Complete your first quiz",
        rarity=Rarity.COMMON, category=BadgeCategory.SPECIAL,
        image_path="/badges/first-steps.svg", color="bg-blue-500",
    ),
)

BADGE_RULES: dict[str, BadgeRule] = {
    "novice": rules.achievement_unlocked("first-quiz"),
    "first-steps": rules.achievement_unlocked("first-quiz"),
    "enthusiast": rules.achievement_unlocked("quiz-enthusiast"),
    "quiz-enthusiast": rules.achievement_unlocked("quiz-enthusiast"),
    "quiz-master-1": rules.achievement_unlocked("quiz-enthusiast"),
    "quiz-master-2": rules.achievement_unlocked("quiz-master"),
    "quiz-master-3": rules.all_of(
        rules.achievement_unlocked("quiz-master"),
        rules.achievement_progress_at_least("quiz-legend", 50),
    ),
    "quiz-master": rules.achievement_unlocked("quiz-legend"),
    "quiz-legend": rules.achievement_unlocked("quiz-legend"),
    "accuracy-expert": rules.achievement_unlocked("accuracy-expert"),
    "consistent": rules.achievement_unlocked("consistent"),
    "high-scorer": rules.achievement_unlocked("high-scorer"),
    "perfect-score": rules.achievement_unlocked("perfect-score"),
    "speed-demon": rules.achievement_unlocked("speed-demon"),
    "time-master": rules.achievement_unlocked("time-master"),
    "streak-master": rules.achievement_unlocked("streak-master"),
    "daily-learner": rules.achievement_unlocked("daily-learner"),
}


DEFAULT_CATALOG = Catalog(
    achievements=ACHIEVEMENT_DEFINITIONS,
    badges=BADGE_DEFINITIONS,
    achievement_rules=ACHIEVEMENT_RULES,
    badge_rules=BADGE_RULES,
)
