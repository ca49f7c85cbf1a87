"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class UserBase(BaseModel):
    """Base user schema with common fields."""

    email: EmailStr
    full_name: str
    department: str


class UserResponse(UserBase):
    """Schema for user responses (public-safe)."""

    id: str
    semester: int = 1
    points: int = 0
    badge_level: str = "Freshman"

    model_config = {"from_attributes": True}


class UserInDB(UserBase):
    """Schema for the authenticated user (internal use)."""

    id: str
    semester: int = 1
    is_active: bool = True
    points: int = 0
    badge_level: str = "Freshman"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
