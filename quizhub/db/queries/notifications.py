"""Notification queries"""
import logging
from typing import Optional

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries.users import USERS_COLLECTION, require_user_id
from quizhub.models.achievement import Notification

logger = logging.getLogger(__name__)


def notifications_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{require_user_id(user_id)}/notifications"


async def add_notification(store: DocumentStore, user_id: str, notification: Notification) -> str:
    """Append a notification and return its generated ID"""
    data = notification.model_dump(mode="json", exclude={"id"})
    return await store.add_document(notifications_path(user_id), data)


async def get_notifications(
    store: DocumentStore,
    user_id: str,
    unread_only: bool = False,
    limit: Optional[int] = None
) -> list[Notification]:
    """Get a user's notifications, newest first"""
    documents = await store.query_collection(notifications_path(user_id), "created_at", "desc")
    notifications = [
        Notification.model_validate({**doc.data, "id": doc.id})
        for doc in documents
    ]
    notifications.sort(key=lambda n: n.created_at, reverse=True)
    if unread_only:
        notifications = [n for n in notifications if not n.read]
    return notifications[:limit] if limit is not None else notifications


async def mark_notification_read(store: DocumentStore, user_id: str, notification_id: str) -> None:
    """Mark one notification as read (RecordNotFoundError if it does not exist)"""
    await store.update_document(notifications_path(user_id), notification_id, {"read": True})


async def mark_all_notifications_read(store: DocumentStore, user_id: str) -> int:
    """
    Mark every unread notification as read

    Returns:
        Number of notifications updated
    """
    unread = await get_notifications(store, user_id, unread_only=True)
    for notification in unread:
        await store.update_document(notifications_path(user_id), notification.id, {"read": True})
    logger.info(f"Marked {len(unread)} notifications read for user {user_id}")
    return len(unread)
