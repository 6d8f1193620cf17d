"""Unit tests for document store queries (quizhub/db/queries/)"""
import pytest
from datetime import datetime, timezone

from quizhub.db.queries import (
    add_notification,
    get_notifications,
    get_user_quiz_history,
    record_quiz_attempt,
)
from quizhub.models.achievement import Notification, NotificationType, Rarity

WHOLE_SECOND = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
HALF_SECOND_LATER = datetime(2026, 10, 19, 12, 0, 0, 500000, tzinfo=timezone.utc)


def _notification(title, created_at, read=False):
    return Notification(
        type=NotificationType.ACHIEVEMENT,
        title=title,
        message=f"You unlocked {title}",
        rarity=Rarity.COMMON,
        created_at=created_at,
        read=read,
    )


# ============================================================================
# Quiz History
# ============================================================================

@pytest.mark.asyncio
async def test_history_orders_sub_second_attempts_newest_first(store, test_user_id, make_attempt):
    older = make_attempt(quiz_id="older", completed_at=WHOLE_SECOND)
    newer = make_attempt(quiz_id="newer", completed_at=HALF_SECOND_LATER)
    await record_quiz_attempt(store, test_user_id, older)
    await record_quiz_attempt(store, test_user_id, newer)

    history = await get_user_quiz_history(store, test_user_id)

    assert [a.quiz_id for a in history] == ["newer", "older"]


@pytest.mark.asyncio
async def test_history_skips_malformed_attempts(store, test_user_id, make_attempt):
    await record_quiz_attempt(store, test_user_id, make_attempt())
    await store.set_document(f"users/{test_user_id}/quiz_history", "broken", {"score": "high"})

    history = await get_user_quiz_history(store, test_user_id)

    assert len(history) == 1


# ============================================================================
# Notifications
# ============================================================================

@pytest.mark.asyncio
async def test_notifications_order_sub_second_newest_first(store, test_user_id):
    await add_notification(store, test_user_id, _notification("Older", WHOLE_SECOND))
    await add_notification(store, test_user_id, _notification("Newer", HALF_SECOND_LATER))

    notifications = await get_notifications(store, test_user_id)

    assert [n.title for n in notifications] == ["Newer", "Older"]


@pytest.mark.asyncio
async def test_notifications_limit_applies_after_ordering(store, test_user_id):
    await add_notification(store, test_user_id, _notification("Older", WHOLE_SECOND))
    await add_notification(store, test_user_id, _notification("Read", HALF_SECOND_LATER, read=True))
    await add_notification(store, test_user_id, _notification("Newest", datetime(2026, 10, 19, 13, 0, tzinfo=timezone.utc)))

    latest = await get_notifications(store, test_user_id, limit=1)
    unread = await get_notifications(store, test_user_id, unread_only=True)

    assert [n.title for n in latest] == ["Newest"]
    assert [n.title for n in unread] == ["Newest", "Older"]
