"""
FastAPI dependencies for authentication and database sessions.
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.database import get_db
from unitportal.kernel.models.personnel import Personnel
from unitportal.kernel.identity.jwt import verify_access_token
from unitportal.kernel.identity.identity_service import PersonnelDirectory


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def _resolve_actor(token: str, db: AsyncSession) -> Optional[Personnel]:
    payload = verify_access_token(token)
    if not payload:
        return None
    try:
        personnel_id = uuid.UUID(payload.sub)
    except ValueError:
        return None
    # Role comes from the directory, not the token
    return await PersonnelDirectory(db).get_optional(personnel_id)


async def get_current_actor_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Optional[Personnel]:
    """Get the signed-in member, or None for a guest."""
    if not credentials:
        return None
    return await _resolve_actor(credentials.credentials, db)


async def get_current_actor(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Personnel:
    """Get the signed-in member or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "not_authenticated", "message": "Not authenticated"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    actor = await _resolve_actor(credentials.credentials, db)
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "invalid_token", "message": "Invalid or expired token"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


CurrentActor = Annotated[Personnel, Depends(get_current_actor)]
OptionalActor = Annotated[Optional[Personnel], Depends(get_current_actor_optional)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
