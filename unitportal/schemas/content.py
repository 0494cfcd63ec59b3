"""
Content section schemas.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from unitportal.kernel.models.content import SectionKind


class SectionCreate(BaseModel):
    title: str = Field(..., max_length=255)
    body: str = ""
    icon: Optional[str] = Field(None, max_length=64)
    link: Optional[str] = None


class SectionUpdate(BaseModel):
    """Section edit; omitted fields stay, blank icon/link clear them."""

    title: Optional[str] = Field(None, max_length=255)
    body: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=64)
    link: Optional[str] = None


class SectionResponse(BaseModel):
    id: uuid.UUID
    kind: SectionKind
    sequence: int
    title: str
    body: str
    icon: Optional[str] = None
    link: Optional[str] = None

    class Config:
        from_attributes = True
