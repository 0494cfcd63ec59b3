"""
Event payload definitions using Pydantic for validation.

These are the payload schemas for events logged to the audit trail. AwardGranted
doubles as the outbound signal for whatever maintains a member's badge list.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from unitportal.kernel.models.base import utcnow


class BaseEvent(BaseModel):
    """Base event payload structure."""

    model_config = ConfigDict(extra="allow")

    timestamp: datetime = Field(default_factory=utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)


# Personnel Events

class RoleChanged(BaseEvent):
    """A member's authorization level changed."""

    previous_role: str
    new_role: str


# Avatar Events

class AvatarDecision(BaseEvent):
    """A moderator resolved a pending avatar."""

    personnel_id: uuid.UUID
    decision: str  # approved, rejected
    avatar: Optional[str] = None


# Award Events

class AwardGranted(BaseEvent):
    """An award was issued to a member."""

    recipient_id: uuid.UUID
    award_id: uuid.UUID
    award_name: str
    award_icon: str


class AwardRevoked(BaseEvent):
    """An award was withdrawn from a member."""

    recipient_id: uuid.UUID
    award_id: uuid.UUID
    award_name: str
