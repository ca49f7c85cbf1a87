"""
Gamification endpoints for points, achievements, leaderboards and analytics.
"""

import json
from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import (
    get_analytics_service,
    get_current_active_user,
    get_gamification_engine,
    get_progress_service,
)
from schemas.gamification import (
    AchievementStatus,
    AwardPointsRequest,
    AwardPointsResponse,
    GamificationOverview,
    LeaderboardResponse,
    LeaderboardScope,
    LeaderboardType,
    LevelDefinitionResponse,
    PointsPreviewResponse,
    Timeframe,
    UserEngagementMetrics,
    UserProgress,
)
from schemas.user import UserInDB
from services.analytics_service import AnalyticsService
from services.gamification_engine import GamificationEngine, UserNotFoundError
from services.levels import LEVEL_DEFINITIONS
from services.points_calculator import UserAction, UserActionType, calculate_points
from services.progress_service import ProgressService, earned_achievement

router = APIRouter()


def _parse_metadata(raw: Optional[str]) -> dict[str, Any]:
    """Decode the JSON `metadata` query parameter."""
    if not raw:
        return {}
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="metadata must be valid JSON")
    if not isinstance(metadata, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="metadata must be a JSON object")
    return metadata


@router.post("/points", response_model=AwardPointsResponse)
async def award_points(
    request: AwardPointsRequest,
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    engine: GamificationEngine = Depends(get_gamification_engine),
) -> AwardPointsResponse:
    """
    Record an action by the current user and award its points.

    Also runs an achievement check and returns any newly unlocked achievements.
    """
    action = UserAction(
        type=request.action,
        user_id=current_user.id,
        resource_id=request.resource_id,
        collection_id=request.collection_id,
        resource_type=request.resource_type,
        metadata=request.metadata,
    )
    result = await engine.update_user_progress(current_user.id, action)

    return AwardPointsResponse(
        success=True,
        points_awarded=result.points_awarded,
        action=request.action,
        new_achievements=[earned_achievement(a) for a in result.new_achievements],
    )


@router.get("/points", response_model=PointsPreviewResponse)
async def preview_points(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    action: UserActionType = Query(...),
    resource_type: Optional[str] = Query(None),
    metadata: Optional[str] = Query(None, description="JSON object"),
) -> PointsPreviewResponse:
    """
    Preview the points an action would earn, without recording it.
    """
    user_action = UserAction(
        type=action,
        user_id=current_user.id,
        resource_type=resource_type,
        metadata=_parse_metadata(metadata),
    )
    return PointsPreviewResponse(points=calculate_points(user_action), action=action)


@router.get("/progress", response_model=UserProgress)
async def get_user_progress(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    progress_service: ProgressService = Depends(get_progress_service),
) -> UserProgress:
    """
    Get the current user's gamification progress.

    Includes points, level, achievements and activity over the last week.
    """
    return await progress_service.get_user_progress(current_user.id)


@router.get("/achievements", response_model=List[AchievementStatus])
async def get_achievements(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    progress_service: ProgressService = Depends(get_progress_service),
) -> list[AchievementStatus]:
    """
    Get every achievement with the current user's unlock status.
    """
    return await progress_service.get_achievement_statuses(current_user.id)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    progress_service: ProgressService = Depends(get_progress_service),
    scope_type: LeaderboardType = Query(LeaderboardType.GLOBAL, alias="type"),
    department: Optional[str] = Query(None),
    course: Optional[str] = Query(None),
    timeframe: Timeframe = Query(Timeframe.ALL_TIME),
    limit: Optional[int] = Query(None),
) -> LeaderboardResponse:
    """
    Get the leaderboard and the current user's rank in it.
    """
    scope = LeaderboardScope(type=scope_type, department=department, course=course, timeframe=timeframe)
    entries = await progress_service.get_leaderboard(scope, limit)

    user_rank = next((entry.rank for entry in entries if entry.user_id == current_user.id), None)
    if user_rank is None:
        user_rank = await progress_service.get_user_rank(current_user.id, scope)

    return LeaderboardResponse(
        leaderboard=entries,
        user_rank=user_rank,
        total_entries=len(entries),
        scope=scope,
    )


@router.get("/levels", response_model=list[LevelDefinitionResponse])
async def get_level_definitions() -> list[LevelDefinitionResponse]:
    """
    Get the level progression definitions.
    """
    return [LevelDefinitionResponse(**level) for level in LEVEL_DEFINITIONS]


@router.get("/analytics", response_model=GamificationOverview)
async def get_analytics_overview(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    analytics_service: AnalyticsService = Depends(get_analytics_service),
    timeframe: Timeframe = Query(Timeframe.WEEKLY),
) -> GamificationOverview:
    """
    Platform-wide gamification metrics.
    """
    return await analytics_service.get_overview(timeframe)


@router.get("/analytics/me", response_model=UserEngagementMetrics)
async def get_my_engagement(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> UserEngagementMetrics:
    """
    Engagement metrics for the current user.
    """
    metrics = await analytics_service.get_user_engagement(current_user.id)
    if metrics is None:
        raise UserNotFoundError(current_user.id)
    return metrics
