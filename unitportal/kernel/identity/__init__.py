"""
Identity Core - personnel directory and access-code authentication.
"""

from unitportal.kernel.identity.access_codes import generate_access_code, normalize_access_code
from unitportal.kernel.identity.jwt import (
    JWTManager,
    IssuedToken,
    AccessTokenPayload,
    get_jwt_manager,
    verify_access_token,
)
from unitportal.kernel.identity.identity_service import PersonnelDirectory, parse_role

__all__ = [
    "generate_access_code",
    "normalize_access_code",
    "JWTManager",
    "IssuedToken",
    "AccessTokenPayload",
    "get_jwt_manager",
    "verify_access_token",
    "PersonnelDirectory",
    "parse_role",
]
