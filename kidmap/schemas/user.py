"""
User schemas
"""

from datetime import datetime
from typing import Optional

from kidmap.schemas.base import BaseSchema


class UserResponse(BaseSchema):
    """User profile as synced from the identity provider"""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
