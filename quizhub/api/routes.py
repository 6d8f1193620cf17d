"""API routes for QuizHub"""
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status

from quizhub.api.models import (
    AchievementItem,
    AchievementListResponse,
    BadgeItem,
    BadgeListResponse,
    DashboardResponse,
    HealthCheckResponse,
    LeaderboardResponse,
    MarkAllReadResponse,
    NotificationListResponse,
    QuizCompletionResponse,
    QuizHistoryResponse,
    StatsResponse,
)
from quizhub.api.auth import require_user_access, verify_api_key
from quizhub.api.middleware import limiter
from quizhub.config import LEADERBOARD_DEFAULT_LIMIT, STORE_BACKEND
from quizhub.db.connection import db
from quizhub.models.quiz import QuizAttempt
from quizhub.services import GamificationService, get_container
from quizhub.services.gamification_service import QuizCompletionResult

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gamification_service() -> GamificationService:
    """Resolve the service from the application container"""
    return get_container().gamification_service


def _completion_response(
    user_id: str,
    result: QuizCompletionResult,
    attempt_id: Optional[str] = None
) -> QuizCompletionResponse:
    return QuizCompletionResponse(
        user_id=user_id,
        attempt_id=attempt_id,
        total_points=result.total_points,
        newly_unlocked_achievements=[
            AchievementItem.from_view(view) for view in result.achievements.newly_unlocked
        ],
        newly_unlocked_badges=[BadgeItem.from_view(view) for view in result.badges.newly_unlocked],
        notifications_delivered=len(result.notifications.delivered),
        notifications_failed=len(result.notifications.failed),
    )


@router.post(
    "/api/v1/users/{user_id}/quiz-attempts",
    response_model=QuizCompletionResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit("30/minute")
async def submit_quiz_attempt(
    request: Request,
    user_id: str,
    attempt: QuizAttempt,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """
    Record a completed quiz and evaluate achievements, badges and notifications

    Rate limit: 30 requests per minute
    """
    result = await service.submit_quiz_attempt(user_id, attempt)
    return _completion_response(user_id, result, attempt_id=attempt.id)


@router.post("/api/v1/users/{user_id}/achievements/refresh", response_model=QuizCompletionResponse)
@limiter.limit("20/minute")
async def refresh_achievements(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Re-run evaluation without recording a new attempt"""
    result = await service.process_quiz_completion(user_id)
    return _completion_response(user_id, result)


@router.post("/api/v1/users/{user_id}/notes-uploads", response_model=QuizCompletionResponse)
@limiter.limit("20/minute")
async def record_notes_upload(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Count a study-notes upload, then re-evaluate"""
    result = await service.record_notes_upload(user_id)
    return _completion_response(user_id, result)


@router.get("/api/v1/users/{user_id}/quiz-history", response_model=QuizHistoryResponse)
@limiter.limit("30/minute")
async def get_quiz_history(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Quiz attempts, most recent first"""
    attempts = await service.get_quiz_history(user_id)
    return QuizHistoryResponse(user_id=user_id, attempts=attempts)


@router.get("/api/v1/users/{user_id}/stats", response_model=StatsResponse)
@limiter.limit("30/minute")
async def get_stats(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Aggregated quiz statistics"""
    stats = await service.get_stats(user_id)
    return StatsResponse(user_id=user_id, stats=stats)


@router.get("/api/v1/users/{user_id}/achievements", response_model=AchievementListResponse)
@limiter.limit("30/minute")
async def get_achievements(
    request: Request,
    user_id: str,
    search: Optional[str] = None,
    category: Optional[str] = None,
    rarity: Optional[str] = None,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """
    Achievements with the user's progress

    Filters narrow the list; the summary counts always cover the whole catalog.
    """
    views, summary = await service.get_achievements(user_id, search, category, rarity)
    return AchievementListResponse(
        user_id=user_id,
        achievements=[AchievementItem.from_view(view) for view in views],
        **summary
    )


@router.get("/api/v1/users/{user_id}/badges", response_model=BadgeListResponse)
@limiter.limit("30/minute")
async def get_badges(
    request: Request,
    user_id: str,
    search: Optional[str] = None,
    category: Optional[str] = None,
    rarity: Optional[str] = None,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Badges with the user's unlock state"""
    views, summary = await service.get_badges(user_id, search, category, rarity)
    return BadgeListResponse(
        user_id=user_id,
        badges=[BadgeItem.from_view(view) for view in views],
        **summary
    )


@router.get("/api/v1/users/{user_id}/dashboard", response_model=DashboardResponse)
@limiter.limit("30/minute")
async def get_dashboard(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Dashboard overview"""
    dashboard = await service.get_dashboard(user_id)
    return DashboardResponse(user_id=user_id, **dashboard)


@router.get("/api/v1/users/{user_id}/notifications", response_model=NotificationListResponse)
@limiter.limit("60/minute")
async def get_notifications(
    request: Request,
    user_id: str,
    unread_only: bool = False,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Notifications, newest first"""
    notifications = await service.get_notifications(user_id, unread_only=unread_only)
    return NotificationListResponse(
        user_id=user_id,
        notifications=notifications,
        unread_count=sum(1 for n in notifications if not n.read),
    )


@router.post(
    "/api/v1/users/{user_id}/notifications/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT
)
@limiter.limit("60/minute")
async def mark_notification_read(
    request: Request,
    user_id: str,
    notification_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Mark one notification as read (404 if it does not exist)"""
    await service.mark_notification_read(user_id, notification_id)


@router.post("/api/v1/users/{user_id}/notifications/read-all", response_model=MarkAllReadResponse)
@limiter.limit("20/minute")
async def mark_all_notifications_read(
    request: Request,
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
    authorized_user: str = Depends(require_user_access)
):
    """Mark every unread notification as read"""
    updated = await service.mark_all_notifications_read(user_id)
    return MarkAllReadResponse(user_id=user_id, updated=updated)


@router.get("/api/v1/leaderboard", response_model=LeaderboardResponse)
@limiter.limit("30/minute")
async def get_leaderboard(
    request: Request,
    limit: int = Query(LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    service: GamificationService = Depends(get_gamification_service),
    api_key: str = Depends(verify_api_key)
):
    """Top users by achievement points"""
    entries = await service.get_leaderboard(limit)
    return LeaderboardResponse(entries=entries)


@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    if STORE_BACKEND == "memory":
        store_status = "memory"
    else:
        try:
            async with db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1")
                    await cur.fetchone()
            store_status = "connected"
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            store_status = "disconnected"

    return HealthCheckResponse(
        status="degraded" if store_status == "disconnected" else "healthy",
        store=store_status,
        timestamp=datetime.now(timezone.utc),
    )
