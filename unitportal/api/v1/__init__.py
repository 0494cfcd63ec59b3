"""
API v1 routes.
"""

from fastapi import APIRouter

from unitportal.api.v1 import auth, personnel, avatars, awards, news, sections
from unitportal.schemas.common import ErrorResponse

# Portal errors share one body shape (see api/errors.py)
ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Sign-in required"},
    403: {"model": ErrorResponse, "description": "Role does not allow this"},
    404: {"model": ErrorResponse, "description": "Not found"},
    409: {"model": ErrorResponse, "description": "Conflicts with current state"},
}

router = APIRouter(responses=ERROR_RESPONSES)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(personnel.router, prefix="/personnel", tags=["Personnel"])
# Mounted without a prefix: owns /personnel/{id}/avatar and /avatars/...
router.include_router(avatars.router, tags=["Avatars"])
router.include_router(awards.router, prefix="/awards", tags=["Awards"])
router.include_router(news.router, prefix="/news", tags=["News"])
router.include_router(sections.router, prefix="/sections", tags=["Sections"])
