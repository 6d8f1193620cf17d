"""
Achievement System

Maps aggregated quiz statistics onto the achievement catalog:
- Progress per achievement, clamped to [0, max_progress]
- Permanent unlocks (an unlocked achievement never re-locks)
- Point totals recomputed from the unlocked set on every evaluation

Evaluation itself is pure (evaluate_achievements); check_and_update_achievements
adds the read and the single persisted write around it.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional, Sequence, TypeVar
import logging

from pydantic import BaseModel, ValidationError as PydanticValidationError

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import (
    get_user_document,
    get_user_quiz_history,
    save_achievement_state,
)
from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog
from quizhub.gamification.progress import aggregate_stats
from quizhub.gamification.streak_system import resolve_current_streak
from quizhub.models.achievement import (
    AchievementView,
    AggregatedStats,
    EvaluationContext,
    UserAchievementState,
)
from quizhub.models.quiz import QuizAttempt

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT", bound=BaseModel)


@dataclass
class AchievementEvaluation:
    """Result of one achievement evaluation"""
    achievements: list[UserAchievementState]
    newly_unlocked: list[AchievementView] = field(default_factory=list)
    total_points: int = 0


def default_achievement_states(catalog: Catalog = DEFAULT_CATALOG) -> list[UserAchievementState]:
    """Fresh, locked state for every achievement in the catalog"""
    return [UserAchievementState(id=a.id) for a in catalog.achievements]


def _salvage_state(model: type[StateT], raw: Any) -> Optional[StateT]:
    """
    Keep the readable fields of a malformed stored state

    An entry whose id survives keeps each other field that validates on its
    own, so a bad progress value never discards a recorded unlock.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
        return None

    kept: dict[str, Any] = {"id": raw["id"]}
    for name in model.model_fields:
        if name == "id" or name not in raw:
            continue
        try:
            model.model_validate({**kept, name: raw[name]})
        except PydanticValidationError:
            continue
        kept[name] = raw[name]
    return model.model_validate(kept)


def parse_states(model: type[StateT], raw_states: Sequence[Any]) -> list[StateT]:
    """Parse stored achievement or badge states, salvaging malformed entries"""
    states = []
    for raw in raw_states:
        try:
            states.append(model.model_validate(raw))
        except PydanticValidationError as e:
            salvaged = _salvage_state(model, raw)
            if salvaged is None:
                logger.warning(f"Skipping malformed {model.__name__} {raw!r}: {e}")
                continue
            logger.warning(f"Repaired malformed {model.__name__} {raw!r}: {e}")
            states.append(salvaged)
    return states


def parse_achievement_states(raw_states: Sequence[dict[str, Any]]) -> list[UserAchievementState]:
    """Parse stored achievement states"""
    return parse_states(UserAchievementState, raw_states)


def load_achievement_states(
    user_data: Optional[dict[str, Any]],
    catalog: Catalog = DEFAULT_CATALOG
) -> Optional[list[UserAchievementState]]:
    """Achievement states from a user document, or None if none are stored"""
    if user_data and user_data.get("achievements"):
        return parse_achievement_states(user_data["achievements"])
    return None


def build_evaluation_context(
    user_data: Optional[dict[str, Any]],
    history: Sequence[QuizAttempt],
    today: Optional[date] = None
) -> EvaluationContext:
    """Gather the non-statistical facts the rules need from the user document"""
    user_data = user_data or {}
    return EvaluationContext(
        current_streak=resolve_current_streak(
            user_data.get("streak"),
            (a.completed_at for a in history),
            today
        ),
        notes_uploaded=int(user_data.get("notes_uploaded", 0) or 0),
    )


def calculate_total_points(
    states: Sequence[UserAchievementState],
    catalog: Catalog = DEFAULT_CATALOG
) -> int:
    """Sum of points over unlocked achievements that exist in the catalog"""
    total = 0
    for state in states:
        definition = catalog.get_achievement(state.id)
        if definition and state.unlocked:
            total += definition.points
    return total


def evaluate_achievements(
    previous: Sequence[UserAchievementState],
    stats: AggregatedStats,
    context: EvaluationContext,
    catalog: Catalog = DEFAULT_CATALOG,
    now: Optional[datetime] = None
) -> AchievementEvaluation:
    """
    Evaluate every achievement in the catalog

    Rules:
    - No rule for a definition id: prior state is kept as is
    - Progress is clamped to [0, max_progress]
    - unlocked = previously unlocked OR the rule says unlock; unlocked
      achievements report full progress
    - unlocked_at is stamped only on the locked -> unlocked transition
    - Stored states whose id is not in the catalog are carried through
      untouched and earn no points

    Args:
        previous: Current stored states (may be empty or partial)
        stats: Aggregated quiz statistics
        context: Streak and other non-statistical facts
        catalog: Definitions and rules
        now: Unlock timestamp (defaults to current UTC time)

    Returns:
        AchievementEvaluation with the full state list, the newly unlocked
        achievements and the point total
    """
    if now is None:
        now = datetime.now(timezone.utc)

    remaining = {state.id: state for state in previous}
    updated: list[UserAchievementState] = []
    newly_unlocked: list[AchievementView] = []

    for definition in catalog.achievements:
        prior = remaining.pop(definition.id, None) or UserAchievementState(id=definition.id)
        rule = catalog.achievement_rules.get(definition.id)

        if rule is None:
            updated.append(prior.model_copy())
            continue

        raw_progress, should_unlock = rule(stats, context)
        unlocked = prior.unlocked or should_unlock

        if unlocked:
            progress = definition.max_progress
        else:
            progress = max(0, min(raw_progress, definition.max_progress))

        unlocked_at = prior.unlocked_at
        if unlocked and not prior.unlocked:
            unlocked_at = now

        state = UserAchievementState(
            id=definition.id,
            progress=progress,
            unlocked=unlocked,
            unlocked_at=unlocked_at,
        )
        updated.append(state)

        if unlocked and not prior.unlocked:
            newly_unlocked.append(AchievementView(definition=definition, state=state))

    for unknown in remaining.values():
        logger.debug(f"Keeping state for achievement '{unknown.id}' not in the catalog")
        updated.append(unknown.model_copy())

    return AchievementEvaluation(
        achievements=updated,
        newly_unlocked=newly_unlocked,
        total_points=calculate_total_points(updated, catalog),
    )


async def get_user_achievements(
    store: DocumentStore,
    user_id: str,
    catalog: Catalog = DEFAULT_CATALOG
) -> list[UserAchievementState]:
    """
    Get a user's achievement states, initializing them on first access

    A user with no stored achievements is not an error: default states are
    written and returned. Any other data-access failure propagates.
    """
    user_data = await get_user_document(store, user_id)
    states = load_achievement_states(user_data, catalog)
    if states is not None:
        return states

    defaults = default_achievement_states(catalog)
    await save_achievement_state(store, user_id, defaults, total_points=0)
    logger.info(f"Initialized {len(defaults)} achievements for user {user_id}")
    return defaults


async def check_and_update_achievements(
    store: DocumentStore,
    user_id: str,
    catalog: Catalog = DEFAULT_CATALOG,
    today: Optional[date] = None
) -> AchievementEvaluation:
    """
    Re-evaluate a user's achievements from their full quiz history

    Reads the user document and quiz history, evaluates, then persists the
    state list and point total in one write. If the write fails the error
    propagates and nothing should be treated as committed.

    Args:
        store: Document store
        user_id: User ID
        catalog: Definitions and rules
        today: Reference date for the derived streak (defaults to today, UTC)

    Returns:
        AchievementEvaluation
    """
    user_data, history = await asyncio.gather(
        get_user_document(store, user_id),
        get_user_quiz_history(store, user_id),
    )

    previous = load_achievement_states(user_data, catalog) or default_achievement_states(catalog)
    stats = aggregate_stats(history)
    context = build_evaluation_context(user_data, history, today)

    evaluation = evaluate_achievements(previous, stats, context, catalog)

    await save_achievement_state(store, user_id, evaluation.achievements, evaluation.total_points)

    for view in evaluation.newly_unlocked:
        logger.info(
            f"User {user_id} unlocked achievement: {view.definition.id} "
            f"({view.definition.title}) +{view.definition.points} points"
        )

    return evaluation


def get_achievement_progress(
    achievement_id: str,
    stats: AggregatedStats,
    context: Optional[EvaluationContext] = None,
    catalog: Catalog = DEFAULT_CATALOG
) -> float:
    """
    Clamped progress toward one achievement from raw statistics

    Returns 0 for ids that are not in the catalog or have no rule.
    """
    definition = catalog.get_achievement(achievement_id)
    rule = catalog.achievement_rules.get(achievement_id)
    if definition is None or rule is None:
        return 0

    raw_progress, _ = rule(stats, context or EvaluationContext())
    return max(0, min(raw_progress, definition.max_progress))


def build_achievement_views(
    states: Sequence[UserAchievementState],
    catalog: Catalog = DEFAULT_CATALOG
) -> list[AchievementView]:
    """Join states with their definitions in catalog order (unknown ids are left out)"""
    by_id = {state.id: state for state in states}
    return [
        AchievementView(
            definition=definition,
            state=by_id.get(definition.id) or UserAchievementState(id=definition.id),
        )
        for definition in catalog.achievements
    ]


def filter_achievements(
    views: Sequence[AchievementView],
    search: Optional[str] = None,
    category: Optional[str] = None,
    rarity: Optional[str] = None
) -> list[AchievementView]:
    """Filter by case-insensitive text search on title/description, category and rarity"""
    term = (search or "").strip().lower()

    def matches(view: AchievementView) -> bool:
        definition = view.definition
        if term and term not in definition.title.lower() and term not in definition.description.lower():
            return False
        if category and category != "all" and definition.category.value != category:
            return False
        if rarity and rarity != "all" and definition.rarity.value != rarity:
            return False
        return True

    return [view for view in views if matches(view)]


def summarize_achievements(
    states: Sequence[UserAchievementState],
    catalog: Catalog = DEFAULT_CATALOG
) -> dict[str, Any]:
    """
    Overview numbers for an achievements page

    Returns:
        {
            'total_achievements': int,
            'total_unlocked': int,
            'completion_percentage': int,
            'total_points': int
        }
    """
    views = build_achievement_views(states, catalog)
    total = len(views)
    unlocked = sum(1 for view in views if view.state.unlocked)
    return {
        'total_achievements': total,
        'total_unlocked': unlocked,
        'completion_percentage': round(unlocked / total * 100) if total > 0 else 0,
        'total_points': calculate_total_points(states, catalog),
    }
