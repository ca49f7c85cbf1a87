"""
Notification-related Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """An in-app notification."""

    id: str
    type: str
    title: str
    message: Optional[str] = None
    data: dict[str, Any] = {}
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MarkAllReadResponse(BaseModel):
    updated: int
