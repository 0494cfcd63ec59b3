"""
Personnel model - member accounts of the unit directory.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from unitportal.kernel.models.base import Base, TimestampMixin, UTCDateTime, generate_uuid


class Role(str, Enum):
    """Authorization levels, independent of rank."""
    GUEST = "guest"
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class AvatarState(str, Enum):
    """Moderation state of a member's profile image."""
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def nickname_key(nickname: str) -> str:
    """Normalized nickname used for uniqueness checks."""
    return nickname.strip().casefold()


class Personnel(Base, TimestampMixin):
    """A member of the unit."""

    __tablename__ = "personnel"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    # Directory order
    roster_number: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
    )
    access_code: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )
    nickname: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    # SQLite lower() is ASCII-only, so the casefolded form is stored
    nickname_key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )

    # Assignment
    rank: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    rank_changed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )
    position: Mapped[str] = mapped_column(
        String(255),
        default="",
        nullable=False,
    )
    position_changed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )
    role: Mapped[Role] = mapped_column(
        String(20),
        default=Role.USER,
        nullable=False,
    )

    # Profile
    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    avatar: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    pending_avatar: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    pending_avatar_submitted_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
    )
    avatar_state: Mapped[AvatarState] = mapped_column(
        String(20),
        default=AvatarState.NONE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Personnel #{self.roster_number} {self.nickname}>"

    @property
    def role_value(self) -> Role:
        """Role as an enum (SQLite hands back plain strings)."""
        return Role(self.role)

    @property
    def has_pending_avatar(self) -> bool:
        return bool(self.pending_avatar)
