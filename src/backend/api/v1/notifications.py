"""
Notification endpoints for the current user's in-app notifications.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import get_current_active_user, get_notification_service
from schemas.notification import MarkAllReadResponse, NotificationResponse
from schemas.user import UserInDB
from services.notification_service import NotificationService

router = APIRouter()


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    notification_service: NotificationService = Depends(get_notification_service),
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
) -> list[NotificationResponse]:
    """
    Get the current user's notifications, newest first.
    """
    notifications = await notification_service.list_notifications(
        current_user.id, unread_only=unread_only, limit=limit
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    notification_service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(current_user.id)
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: str,
    current_user: Annotated[UserInDB, Depends(get_current_active_user)],
    notification_service: NotificationService = Depends(get_notification_service),
) -> None:
    """
    Mark one of the current user's notifications as read.
    """
    if not await notification_service.mark_read(current_user.id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
