"""
Shared dependencies for API endpoints.

Includes:
- User JWT authentication
- Service construction over the request's repositories
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.security import decode_token
from models.user import User
from repositories.provider import Repositories, get_repositories
from schemas.user import UserInDB
from services.analytics_service import AnalyticsService
from services.cache_service import TTLCache, get_leaderboard_cache
from services.gamification_engine import GamificationEngine
from services.notification_service import NotificationService
from services.progress_service import ProgressService

logger = structlog.get_logger(__name__)

# Security schemes
security = HTTPBearer()


# =============================================================================
# Helper Functions
# =============================================================================


def _user_model_to_schema(user: User) -> UserInDB:
    """Convert a User SQLAlchemy model to a UserInDB Pydantic schema."""
    return UserInDB(
        id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        department=user.department,
        semester=user.semester,
        is_active=user.is_active,
        points=user.points or 0,
        badge_level=user.badge_level,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# =============================================================================
# User Authentication (JWT-based)
# =============================================================================


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    repos: Repositories = Depends(get_repositories),
) -> UserInDB:
    """
    Extract and validate the current user from the JWT token.

    Raises:
        HTTPException: If token is invalid or user not found.
    """
    payload = decode_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await repos.users.get_by_id(user_id)
    if not user:
        logger.warning("token_user_not_found", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _user_model_to_schema(user)


async def get_current_active_user(
    current_user: Annotated[UserInDB, Depends(get_current_user)],
) -> UserInDB:
    """Ensure the current user is active."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )
    return current_user


# =============================================================================
# Services
# =============================================================================


async def get_gamification_engine(repos: Repositories = Depends(get_repositories)) -> GamificationEngine:
    return GamificationEngine(repos)


async def get_progress_service(
    repos: Repositories = Depends(get_repositories),
    cache: TTLCache = Depends(get_leaderboard_cache),
) -> ProgressService:
    return ProgressService(repos, cache=cache)


async def get_analytics_service(repos: Repositories = Depends(get_repositories)) -> AnalyticsService:
    return AnalyticsService(repos)


async def get_notification_service(repos: Repositories = Depends(get_repositories)) -> NotificationService:
    return NotificationService(repos)
