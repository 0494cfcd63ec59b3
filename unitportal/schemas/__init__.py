"""
Pydantic schemas for API request/response validation.
"""

from unitportal.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    SuccessResponse,
    HealthResponse,
)
from unitportal.schemas.personnel import (
    PersonnelCreate,
    AssignmentUpdate,
    ProfileUpdate,
    PersonnelResponse,
    PromotionStatusResponse,
)
from unitportal.schemas.auth import (
    LoginRequest,
    TokenResponse,
    CapabilitiesResponse,
)
from unitportal.schemas.avatar import (
    AvatarSubmit,
    AvatarRequestResponse,
)
from unitportal.schemas.award import (
    AwardCreate,
    AwardGrantRequest,
    AwardResponse,
    LedgerEntryResponse,
)
from unitportal.schemas.news import (
    NewsCreate,
    NewsUpdate,
    NewsPostResponse,
)
from unitportal.schemas.content import (
    SectionCreate,
    SectionUpdate,
    SectionResponse,
)

__all__ = [
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "SuccessResponse",
    "HealthResponse",
    # Personnel
    "PersonnelCreate",
    "AssignmentUpdate",
    "ProfileUpdate",
    "PersonnelResponse",
    "PromotionStatusResponse",
    # Auth
    "LoginRequest",
    "TokenResponse",
    "CapabilitiesResponse",
    # Avatar
    "AvatarSubmit",
    "AvatarRequestResponse",
    # Award
    "AwardCreate",
    "AwardGrantRequest",
    "AwardResponse",
    "LedgerEntryResponse",
    # News
    "NewsCreate",
    "NewsUpdate",
    "NewsPostResponse",
    # Content
    "SectionCreate",
    "SectionUpdate",
    "SectionResponse",
]
