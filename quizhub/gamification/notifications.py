"""
Notification Emitter

Writes one notification per newly unlocked achievement or badge. Writes are
independent: a failed write is logged and the remaining items are still
written. Nothing here deduplicates, so callers must only pass genuine
locked -> unlocked transitions.
"""

from dataclasses import dataclass, field
from typing import Sequence
import logging

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import add_notification
from quizhub.exceptions import DataAccessError
from quizhub.models.achievement import (
    AchievementView,
    BadgeView,
    Notification,
    NotificationType,
)

logger = logging.getLogger(__name__)


@dataclass
class NotificationReport:
    """Which notifications were written and which items failed"""
    delivered: list[str] = field(default_factory=list)  # Notification IDs
    failed: list[str] = field(default_factory=list)  # Achievement/badge IDs

    def merge(self, other: "NotificationReport") -> "NotificationReport":
        return NotificationReport(
            delivered=self.delivered + other.delivered,
            failed=self.failed + other.failed,
        )


def build_achievement_notification(view: AchievementView) -> Notification:
    """Notification announcing an unlocked achievement"""
    definition = view.definition
    message = f'Congratulations! You\'ve unlocked the "{definition.title}" achievement.'
    if definition.rewards and definition.rewards.points:
        message += f" +{definition.rewards.points} points"

    return Notification(
        type=NotificationType.ACHIEVEMENT,
        title=f"Achievement Unlocked: {definition.title}",
        message=message,
        icon=definition.icon,
        rarity=definition.rarity,
        points=definition.points,
    )


def build_badge_notification(view: BadgeView) -> Notification:
    """Notification announcing an unlocked badge"""
    definition = view.definition
    return Notification(
        type=NotificationType.BADGE,
        title=f"Badge Unlocked: {definition.name}",
        message=f'You\'ve earned the "{definition.name}" badge! {definition.description}',
        rarity=definition.rarity,
        color=definition.color,
    )


async def _emit(
    store: DocumentStore,
    user_id: str,
    items: Sequence[tuple[str, Notification]]
) -> NotificationReport:
    report = NotificationReport()
    for item_id, notification in items:
        try:
            notification_id = await add_notification(store, user_id, notification)
        except DataAccessError as e:
            logger.warning(
                f"Failed to write {notification.type.value} notification for '{item_id}' "
                f"(user {user_id}): {e.message}"
            )
            report.failed.append(item_id)
            continue
        report.delivered.append(notification_id)
    return report


async def create_achievement_notifications(
    store: DocumentStore,
    user_id: str,
    achievements: Sequence[AchievementView]
) -> NotificationReport:
    """Write one notification per unlocked achievement (best effort)"""
    report = await _emit(
        store,
        user_id,
        [(view.definition.id, build_achievement_notification(view)) for view in achievements]
    )
    logger.info(
        f"Achievement notifications for user {user_id}: "
        f"{len(report.delivered)} written, {len(report.failed)} failed"
    )
    return report


async def create_badge_notifications(
    store: DocumentStore,
    user_id: str,
    badges: Sequence[BadgeView]
) -> NotificationReport:
    """Write one notification per unlocked badge (best effort)"""
    report = await _emit(
        store,
        user_id,
        [(view.definition.id, build_badge_notification(view)) for view in badges]
    )
    logger.info(
        f"Badge notifications for user {user_id}: "
        f"{len(report.delivered)} written, {len(report.failed)} failed"
    )
    return report
