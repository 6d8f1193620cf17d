"""
Badge System

Badges are second-order awards: each badge rule looks at the user's
achievement states, never at raw statistics. Unlocks are permanent, exactly
as for achievements.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence
import logging

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import get_user_document, save_badge_state
from quizhub.gamification.achievement_system import (
    default_achievement_states,
    load_achievement_states,
    parse_states,
)
from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog
from quizhub.models.achievement import BadgeView, UserAchievementState, UserBadgeState

logger = logging.getLogger(__name__)


@dataclass
class BadgeEvaluation:
    """Result of one badge evaluation"""
    badges: list[UserBadgeState]
    newly_unlocked: list[BadgeView] = field(default_factory=list)


def default_badge_states(catalog: Catalog = DEFAULT_CATALOG) -> list[UserBadgeState]:
    """Fresh, locked state for every badge in the catalog"""
    return [UserBadgeState(id=b.id) for b in catalog.badges]


def load_badge_states(user_data: Optional[dict[str, Any]]) -> Optional[list[UserBadgeState]]:
    """Badge states from a user document, or None if none are stored"""
    if not user_data or not user_data.get("badges"):
        return None
    return parse_states(UserBadgeState, user_data["badges"])


def evaluate_badges(
    previous: Sequence[UserBadgeState],
    achievements: Sequence[UserAchievementState],
    catalog: Catalog = DEFAULT_CATALOG,
    now: Optional[datetime] = None
) -> BadgeEvaluation:
    """
    Evaluate every badge in the catalog against achievement states

    Same guarantees as evaluate_achievements: no-rule badges keep their prior
    state, unlocks are permanent, unlocked_at is stamped only on the
    transition, and stored badges missing from the catalog are carried through.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    achievements_by_id = {a.id: a for a in achievements}
    remaining = {badge.id: badge for badge in previous}
    updated: list[UserBadgeState] = []
    newly_unlocked: list[BadgeView] = []

    for definition in catalog.badges:
        prior = remaining.pop(definition.id, None) or UserBadgeState(id=definition.id)
        rule = catalog.badge_rules.get(definition.id)

        if rule is None:
            updated.append(prior.model_copy())
            continue

        unlocked = prior.unlocked or rule(achievements_by_id)
        unlocked_at = prior.unlocked_at
        if unlocked and not prior.unlocked:
            unlocked_at = now

        state = UserBadgeState(id=definition.id, unlocked=unlocked, unlocked_at=unlocked_at)
        updated.append(state)

        if unlocked and not prior.unlocked:
            newly_unlocked.append(BadgeView(definition=definition, state=state))

    for unknown in remaining.values():
        logger.debug(f"Keeping state for badge '{unknown.id}' not in the catalog")
        updated.append(unknown.model_copy())

    return BadgeEvaluation(badges=updated, newly_unlocked=newly_unlocked)


async def get_user_badges(
    store: DocumentStore,
    user_id: str,
    catalog: Catalog = DEFAULT_CATALOG
) -> list[UserBadgeState]:
    """Get a user's badge states, initializing them on first access"""
    user_data = await get_user_document(store, user_id)
    states = load_badge_states(user_data)
    if states is not None:
        return states

    defaults = default_badge_states(catalog)
    await save_badge_state(store, user_id, defaults)
    logger.info(f"Initialized {len(defaults)} badges for user {user_id}")
    return defaults


async def check_and_update_badges(
    store: DocumentStore,
    user_id: str,
    achievements: Optional[Sequence[UserAchievementState]] = None,
    catalog: Catalog = DEFAULT_CATALOG
) -> BadgeEvaluation:
    """
    Re-evaluate a user's badges and persist them in one write

    Args:
        store: Document store
        user_id: User ID
        achievements: Achievement states to evaluate against; read from the
            user document when omitted
        catalog: Definitions and rules

    Returns:
        BadgeEvaluation
    """
    user_data = await get_user_document(store, user_id)

    if achievements is None:
        achievements = load_achievement_states(user_data, catalog) or default_achievement_states(catalog)

    previous = load_badge_states(user_data) or default_badge_states(catalog)
    evaluation = evaluate_badges(previous, achievements, catalog)

    await save_badge_state(store, user_id, evaluation.badges)

    for view in evaluation.newly_unlocked:
        logger.info(f"User {user_id} unlocked badge: {view.definition.id} ({view.definition.name})")

    return evaluation


def build_badge_views(
    states: Sequence[UserBadgeState],
    catalog: Catalog = DEFAULT_CATALOG
) -> list[BadgeView]:
    """Join states with their definitions in catalog order (unknown ids are left out)"""
    by_id = {state.id: state for state in states}
    return [
        BadgeView(definition=definition, state=by_id.get(definition.id) or UserBadgeState(id=definition.id))
        for definition in catalog.badges
    ]


def filter_badges(
    views: Sequence[BadgeView],
    search: Optional[str] = None,
    category: Optional[str] = None,
    rarity: Optional[str] = None
) -> list[BadgeView]:
    """Filter by case-insensitive text search on name/description, category and rarity"""
    term = (search or "").strip().lower()

    def matches(view: BadgeView) -> bool:
        definition = view.definition
        if term and term not in definition.name.lower() and term not in definition.description.lower():
            return False
        if category and category != "all" and definition.category.value != category:
            return False
        if rarity and rarity != "all" and definition.rarity.value != rarity:
            return False
        return True

    return [view for view in views if matches(view)]


def summarize_badges(states: Sequence[UserBadgeState], catalog: Catalog = DEFAULT_CATALOG) -> dict[str, int]:
    """Unlocked and total badge counts"""
    views = build_badge_views(states, catalog)
    return {
        'total_badges': len(views),
        'total_unlocked': sum(1 for view in views if view.state.unlocked),
    }
