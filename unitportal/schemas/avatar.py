"""
Avatar moderation schemas.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class AvatarSubmit(BaseModel):
    """Proposed profile image (URL or data URL)."""

    image: str


class AvatarRequestResponse(BaseModel):
    """One entry of the moderation queue."""

    personnel_id: uuid.UUID
    nickname: str
    avatar: str
    submitted_at: datetime

    class Config:
        from_attributes = True
