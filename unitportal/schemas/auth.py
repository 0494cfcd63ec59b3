"""
Authentication schemas.
"""

from typing import List

from pydantic import BaseModel, Field

from unitportal.kernel.models.personnel import Role
from unitportal.kernel.permissions.permission_service import Capabilities, Page
from unitportal.schemas.personnel import PersonnelResponse


class LoginRequest(BaseModel):
    """Access-code sign-in request."""

    access_code: str = Field(..., max_length=64)


class TokenResponse(BaseModel):
    """Authentication token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    member: PersonnelResponse


class CapabilitiesResponse(BaseModel):
    """What the caller's role may see and change."""

    role: Role
    can_edit_content: bool
    is_admin: bool
    can_act: bool
    visible_pages: List[Page]

    @classmethod
    def from_capabilities(cls, caps: Capabilities) -> "CapabilitiesResponse":
        return cls(
            role=caps.role,
            can_edit_content=caps.can_edit_content,
            is_admin=caps.is_admin,
            can_act=caps.can_act,
            visible_pages=list(caps.visible_pages),
        )
