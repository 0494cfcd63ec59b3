"""
Personnel directory schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from unitportal.engines.promotion import rank_label
from unitportal.kernel.models.personnel import AvatarState, Personnel, Role


class PersonnelCreate(BaseModel):
    """Registration request (admin only)."""

    nickname: str = Field(..., max_length=100)
    rank: int = 0
    position: str = Field("", max_length=255)
    role: Role = Role.USER


class AssignmentUpdate(BaseModel):
    """Rank / position / role change; omitted fields stay as they are."""

    rank: Optional[int] = None
    position: Optional[str] = Field(None, max_length=255)
    role: Optional[Role] = None


class ProfileUpdate(BaseModel):
    """Self-service profile edit."""

    bio: Optional[str] = Field(None, max_length=5000)


class PersonnelResponse(BaseModel):
    """A directory record with its derived fields."""

    id: uuid.UUID
    roster_number: int
    nickname: str
    rank: int
    rank_label: str
    rank_changed_at: datetime
    position: str
    position_changed_at: datetime
    role: Role
    bio: Optional[str] = None
    avatar: Optional[str] = None
    avatar_state: AvatarState
    has_pending_avatar: bool = False
    awards: List[str] = []
    promotion_due: bool = False
    # Only shown to admins
    access_code: Optional[str] = None

    @classmethod
    def from_record(
        cls,
        record: Personnel,
        awards: List[str],
        promotion_due: bool,
        show_access_code: bool = False,
    ) -> "PersonnelResponse":
        return cls(
            id=record.id,
            roster_number=record.roster_number,
            nickname=record.nickname,
            rank=record.rank,
            rank_label=rank_label(record.rank),
            rank_changed_at=record.rank_changed_at,
            position=record.position,
            position_changed_at=record.position_changed_at,
            role=Role(record.role),
            bio=record.bio,
            avatar=record.avatar,
            avatar_state=AvatarState(record.avatar_state),
            has_pending_avatar=record.has_pending_avatar,
            awards=awards,
            promotion_due=promotion_due,
            access_code=record.access_code if show_access_code else None,
        )


class PromotionStatusResponse(BaseModel):
    """Time-in-rank view of one member."""

    personnel_id: uuid.UUID
    rank: int
    rank_label: str
    rank_changed_at: datetime
    days_in_rank: int
    required_days: Optional[int] = None
    days_until_due: Optional[int] = None
    promotion_due: bool
