"""Leaderboard: users ranked by achievement points"""
import logging

from pydantic import BaseModel

from quizhub.config import LEADERBOARD_DEFAULT_LIMIT
from quizhub.db.document_store import DocumentStore
from quizhub.db.queries import list_users_by_points
from quizhub.gamification.achievement_system import load_achievement_states
from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog

logger = logging.getLogger(__name__)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    name: str
    total_points: int
    achievements_unlocked: int


async def get_leaderboard(
    store: DocumentStore,
    limit: int = LEADERBOARD_DEFAULT_LIMIT,
    catalog: Catalog = DEFAULT_CATALOG
) -> list[LeaderboardEntry]:
    """
    Top users by total points

    Users with equal points share a rank (1, 1, 3, ...). Users who have never
    been evaluated count as 0 points.
    """
    documents = await list_users_by_points(store, limit=limit)

    entries: list[LeaderboardEntry] = []
    for position, doc in enumerate(documents, start=1):
        points = int(doc.data.get("total_points") or 0)
        if entries and entries[-1].total_points == points:
            rank = entries[-1].rank
        else:
            rank = position

        states = load_achievement_states(doc.data, catalog) or []
        entries.append(LeaderboardEntry(
            rank=rank,
            user_id=doc.id,
            name=doc.data.get("name") or doc.data.get("email") or doc.id,
            total_points=points,
            achievements_unlocked=sum(
                1 for s in states if s.unlocked and catalog.get_achievement(s.id)
            ),
        ))

    logger.debug(f"Leaderboard built with {len(entries)} entries")
    return entries
