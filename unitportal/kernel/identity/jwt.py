"""
JWT token management for signed-in members.

A token only proves which directory record signed in; the role inside it is
informational. Every request re-reads the record, so role changes apply
immediately.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from unitportal.config import get_settings


class AccessTokenPayload(BaseModel):
    """JWT access token payload."""

    sub: str  # Personnel ID
    nickname: str
    role: str
    exp: datetime
    iat: datetime
    jti: str


class IssuedToken(BaseModel):
    """A freshly signed access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until expiry


class JWTManager:
    """JWT token creation and verification."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.access_token_expire_minutes
        )

    def create_access_token(
        self,
        personnel_id: uuid.UUID,
        nickname: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime, str]:
        """
        Create a new access token.

        Returns:
            Tuple of (token, expiration_datetime, token_id)
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))
        jti = str(uuid.uuid4())

        payload = {
            "sub": str(personnel_id),
            "nickname": nickname,
            "role": role,
            "exp": expire,
            "iat": now,
            "jti": jti,
            "type": "access",
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return token, expire, jti

    def issue(self, personnel_id: uuid.UUID, nickname: str, role: str) -> IssuedToken:
        token, expire, _ = self.create_access_token(personnel_id, nickname, role)
        expires_in = int((expire - datetime.now(timezone.utc)).total_seconds())
        return IssuedToken(access_token=token, expires_in=expires_in)

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """
        Verify and decode an access token.

        Returns:
            AccessTokenPayload if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError:
            return None

        if payload.get("type") != "access":
            return None

        return AccessTokenPayload(
            sub=payload["sub"],
            nickname=payload.get("nickname", ""),
            role=payload["role"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            jti=payload["jti"],
        )


# Default manager instance
_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create the default JWT manager."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager


def verify_access_token(token: str) -> Optional[AccessTokenPayload]:
    """Verify an access token."""
    return get_jwt_manager().verify_access_token(token)
