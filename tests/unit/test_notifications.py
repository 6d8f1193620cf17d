"""Unit tests for unlock notifications (quizhub/gamification/notifications.py)"""
import pytest
from unittest.mock import AsyncMock, patch

from quizhub.db.queries import (
    get_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from quizhub.exceptions import QueryError, RecordNotFoundError
from quizhub.gamification.catalog import DEFAULT_CATALOG
from quizhub.gamification.notifications import (
    build_achievement_notification,
    build_badge_notification,
    create_achievement_notifications,
    create_badge_notifications,
)
from quizhub.models.achievement import (
    AchievementView,
    BadgeView,
    NotificationType,
    UserAchievementState,
    UserBadgeState,
)


def _achievement_view(achievement_id):
    return AchievementView(
        definition=DEFAULT_CATALOG.get_achievement(achievement_id),
        state=UserAchievementState(id=achievement_id, unlocked=True),
    )


def _badge_view(badge_id):
    return BadgeView(
        definition=DEFAULT_CATALOG.get_badge(badge_id),
        state=UserBadgeState(id=badge_id, unlocked=True),
    )


def test_build_achievement_notification():
    notification = build_achievement_notification(_achievement_view("perfect-score"))

    assert notification.type == NotificationType.ACHIEVEMENT
    assert notification.title == "Achievement Unlocked: Perfect Score"
    assert notification.message.startswith('Congratulations! You\'ve unlocked the "Perfect Score" achievement.')
    assert notification.message.endswith("+200 points")
    assert notification.points == 200
    assert notification.read is False


def test_build_badge_notification():
    notification = build_badge_notification(_badge_view("novice"))

    assert notification.type == NotificationType.BADGE
    assert notification.title == "Badge Unlocked: Novice"
    assert notification.color == DEFAULT_CATALOG.get_badge("novice").color


@pytest.mark.asyncio
async def test_create_achievement_notifications_writes_one_per_unlock(store, test_user_id):
    report = await create_achievement_notifications(
        store, test_user_id, [_achievement_view("first-quiz"), _achievement_view("speed-demon")]
    )

    assert len(report.delivered) == 2
    assert report.failed == []
    stored = await get_notifications(store, test_user_id)
    assert {n.title for n in stored} == {
        "Achievement Unlocked: First Steps",
        "Achievement Unlocked: Speed Demon",
    }


@pytest.mark.asyncio
async def test_failed_write_does_not_stop_remaining(store, test_user_id):
    """A failed write is reported and the rest are still written"""
    real_add = store.add_document
    calls = {"count": 0}

    async def flaky_add(collection_path, data):
        calls["count"] += 1
        if calls["count"] == 1:
            raise QueryError("insert failed", collection=collection_path)
        return await real_add(collection_path, data)

    with patch.object(store, 'add_document', AsyncMock(side_effect=flaky_add)):
        report = await create_badge_notifications(
            store, test_user_id, [_badge_view("novice"), _badge_view("first-steps")]
        )

    assert report.failed == ["novice"]
    assert len(report.delivered) == 1
    stored = await get_notifications(store, test_user_id)
    assert [n.title for n in stored] == ["Badge Unlocked: First Steps"]


@pytest.mark.asyncio
async def test_create_notifications_with_nothing_unlocked(store, test_user_id):
    report = await create_achievement_notifications(store, test_user_id, [])

    assert report.delivered == [] and report.failed == []


@pytest.mark.asyncio
async def test_mark_notifications_read(store, test_user_id):
    report = await create_achievement_notifications(
        store, test_user_id, [_achievement_view("first-quiz"), _achievement_view("high-scorer")]
    )

    await mark_notification_read(store, test_user_id, report.delivered[0])

    assert len(await get_notifications(store, test_user_id, unread_only=True)) == 1
    assert await mark_all_notifications_read(store, test_user_id) == 1
    assert await get_notifications(store, test_user_id, unread_only=True) == []


@pytest.mark.asyncio
async def test_mark_missing_notification_read(store, test_user_id):
    with pytest.raises(RecordNotFoundError):
        await mark_notification_read(store, test_user_id, "does-not-exist")
