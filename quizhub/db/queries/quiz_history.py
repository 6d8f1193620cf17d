"""Quiz history queries"""
import logging

from pydantic import ValidationError as PydanticValidationError

from quizhub.db.document_store import DocumentStore
from quizhub.db.queries.users import USERS_COLLECTION, require_user_id
from quizhub.models.quiz import QuizAttempt

logger = logging.getLogger(__name__)


def quiz_history_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{require_user_id(user_id)}/quiz_history"


async def record_quiz_attempt(store: DocumentStore, user_id: str, attempt: QuizAttempt) -> str:
    """
    Save a completed quiz attempt

    Returns:
        Attempt ID
    """
    data = attempt.model_dump(mode="json", exclude={"id"})
    await store.set_document(quiz_history_path(user_id), attempt.id, data)
    logger.info(
        f"Recorded attempt {attempt.id} for user {user_id}: "
        f"quiz={attempt.quiz_id}, score={attempt.score}"
    )
    return attempt.id


async def get_user_quiz_history(store: DocumentStore, user_id: str) -> list[QuizAttempt]:
    """
    Get every quiz attempt for a user, most recent first

    Attempt documents that fail validation are logged and left out.
    """
    documents = await store.query_collection(quiz_history_path(user_id), "completed_at", "desc")

    history = []
    for doc in documents:
        try:
            history.append(QuizAttempt.model_validate({**doc.data, "id": doc.id}))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed attempt {doc.id} for user {user_id}: {e}")

    # Stored timestamps sort as strings; re-sort on the parsed value
    history.sort(key=lambda attempt: attempt.completed_at, reverse=True)
    return history
