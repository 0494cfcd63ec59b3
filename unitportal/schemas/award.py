"""
Award schemas.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from unitportal.kernel.models.award import Award


class AwardCreate(BaseModel):
    """New award definition."""

    name: str = Field(..., max_length=255)
    icon: str = Field(..., max_length=32)


class AwardGrantRequest(BaseModel):
    """Issue an award to a member."""

    recipient_id: uuid.UUID


class LedgerEntryResponse(BaseModel):
    recipient_id: uuid.UUID
    nickname: str
    granted_at: datetime


class AwardResponse(BaseModel):
    """An award with its recipients in grant order."""

    id: uuid.UUID
    name: str
    icon: str
    recipients: List[LedgerEntryResponse] = []

    @classmethod
    def from_award(cls, award: Award) -> "AwardResponse":
        return cls(
            id=award.id,
            name=award.name,
            icon=award.icon,
            recipients=[
                LedgerEntryResponse(
                    recipient_id=entry.recipient_id,
                    nickname=entry.recipient.nickname,
                    granted_at=entry.granted_at,
                )
                for entry in award.ledger
            ],
        )
