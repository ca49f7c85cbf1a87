"""
API v1 router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.v1.gamification import router as gamification_router
from api.v1.notifications import router as notifications_router

router = APIRouter()

router.include_router(gamification_router, prefix="/gamification", tags=["Gamification"])
router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
