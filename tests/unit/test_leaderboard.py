"""Unit tests for the leaderboard (quizhub/gamification/leaderboard.py)"""
import pytest

from quizhub.gamification.leaderboard import get_leaderboard


@pytest.mark.asyncio
async def test_leaderboard_ranks_by_points_with_ties(store):
    await store.set_document("users", "u1", {"name": "Ada", "total_points": 135})
    await store.set_document("users", "u2", {"email": "grace@example.com", "total_points": 300})
    await store.set_document("users", "u3", {"name": "Linus", "total_points": 135})
    await store.set_document("users", "u4", {"total_points": 10})

    entries = await get_leaderboard(store, limit=10)

    assert [(e.rank, e.user_id) for e in entries][:1] == [(1, "u2")]
    assert [e.rank for e in entries] == [1, 2, 2, 4]
    assert {e.user_id for e in entries[1:3]} == {"u1", "u3"}
    assert entries[0].name == "grace@example.com"
    assert entries[3].name == "u4"


@pytest.mark.asyncio
async def test_leaderboard_counts_known_unlocked_achievements(store):
    await store.set_document("users", "u1", {
        "total_points": 10,
        "achievements": [
            {"id": "first-quiz", "progress": 1, "unlocked": True},
            {"id": "quiz-enthusiast", "progress": 2, "unlocked": False},
            {"id": "retired-award", "progress": 1, "unlocked": True},
        ],
    })

    entries = await get_leaderboard(store)

    assert entries[0].achievements_unlocked == 1


@pytest.mark.asyncio
async def test_leaderboard_respects_limit(store):
    for i in range(5):
        await store.set_document("users", f"u{i}", {"total_points": i * 10})

    entries = await get_leaderboard(store, limit=3)

    assert [e.user_id for e in entries] == ["u4", "u3", "u2"]


@pytest.mark.asyncio
async def test_leaderboard_empty(store):
    assert await get_leaderboard(store) == []
