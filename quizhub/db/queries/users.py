"""User document queries (achievement state, badge state, profile)"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from quizhub.db.document_store import Document, DocumentStore
from quizhub.exceptions import ValidationError
from quizhub.models.achievement import UserAchievementState, UserBadgeState

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def require_user_id(user_id: Optional[str]) -> str:
    """Reject empty user ids before they reach the store"""
    if not user_id or not user_id.strip():
        raise ValidationError("User id must be a non-empty string", field="user_id", value=user_id)
    return user_id


async def get_user_document(store: DocumentStore, user_id: str) -> Optional[dict[str, Any]]:
    """
    Get the user's document data

    Returns:
        Document data, or None if the user has no document yet
    """
    doc = await store.get_document(USERS_COLLECTION, require_user_id(user_id))
    return doc.data if doc else None


async def save_achievement_state(
    store: DocumentStore,
    user_id: str,
    achievements: list[UserAchievementState],
    total_points: int
) -> None:
    """
    Persist achievement states and the point total in a single write

    Args:
        store: Document store
        user_id: User ID
        achievements: Full list of achievement states
        total_points: Sum of points over unlocked achievements
    """
    await store.set_document(
        USERS_COLLECTION,
        require_user_id(user_id),
        {
            "achievements": [a.model_dump(mode="json") for a in achievements],
            "total_points": total_points,
            "last_achievement_check": datetime.now(timezone.utc).isoformat(),
        },
        merge=True
    )


async def save_badge_state(store: DocumentStore, user_id: str, badges: list[UserBadgeState]) -> None:
    """Persist badge states in a single write"""
    await store.set_document(
        USERS_COLLECTION,
        require_user_id(user_id),
        {"badges": [b.model_dump(mode="json") for b in badges]},
        merge=True
    )


async def record_notes_upload(store: DocumentStore, user_id: str) -> int:
    """
    Count one study-notes upload for the user

    Returns:
        New upload count
    """
    data = await get_user_document(store, user_id) or {}
    count = int(data.get("notes_uploaded", 0)) + 1
    await store.set_document(USERS_COLLECTION, user_id, {"notes_uploaded": count}, merge=True)
    logger.info(f"User {user_id} uploaded notes ({count} total)")
    return count


async def list_users_by_points(store: DocumentStore, limit: Optional[int] = None) -> list[Document]:
    """Get user documents ordered by total points, highest first"""
    return await store.query_collection(USERS_COLLECTION, "total_points", "desc", limit=limit)
