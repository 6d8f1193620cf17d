"""
Document store queries - re-exported for convenience.

Module organization:
- users.py: user document (achievement state, badge state, profile counters)
- quiz_history.py: quiz attempts
- notifications.py: per-user notifications
"""

from quizhub.db.queries.users import (
    USERS_COLLECTION,
    require_user_id,
    get_user_document,
    save_achievement_state,
    save_badge_state,
    record_notes_upload,
    list_users_by_points,
)
from quizhub.db.queries.quiz_history import (
    quiz_history_path,
    record_quiz_attempt,
    get_user_quiz_history,
)
from quizhub.db.queries.notifications import (
    notifications_path,
    add_notification,
    get_notifications,
    mark_notification_read,
    mark_all_notifications_read,
)

__all__ = [
    "USERS_COLLECTION",
    "require_user_id",
    "get_user_document",
    "save_achievement_state",
    "save_badge_state",
    "record_notes_upload",
    "list_users_by_points",
    "quiz_history_path",
    "record_quiz_attempt",
    "get_user_quiz_history",
    "notifications_path",
    "add_notification",
    "get_notifications",
    "mark_notification_read",
    "mark_all_notifications_read",
]
