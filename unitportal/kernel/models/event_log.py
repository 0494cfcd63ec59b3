"""
Immutable event log for audit trail.

All state mutations are logged here in the same transaction as the change.
Outbound signals for other collaborators (AwardGranted) travel the same way.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from unitportal.kernel.models.base import Base, UTCDateTime, generate_uuid, utcnow


class EventType(str, Enum):
    """All event types for the audit log."""

    # Personnel events
    PERSONNEL_REGISTERED = "personnel.registered"
    PERSONNEL_LOGGED_IN = "personnel.logged_in"
    PERSONNEL_ASSIGNMENT_CHANGED = "personnel.assignment_changed"
    PERSONNEL_ROLE_CHANGED = "personnel.role_changed"
    PROFILE_UPDATED = "personnel.profile_updated"

    # Avatar moderation events
    AVATAR_SUBMITTED = "avatar.submitted"
    AVATAR_APPROVED = "avatar.approved"
    AVATAR_REJECTED = "avatar.rejected"

    # Award events
    AWARD_CREATED = "award.created"
    AWARD_DELETED = "award.deleted"
    AWARD_GRANTED = "award.granted"
    AWARD_REVOKED = "award.revoked"

    # News events
    NEWS_PUBLISHED = "news.published"
    NEWS_EDITED = "news.edited"
    NEWS_DELETED = "news.deleted"
    NEWS_REACTION_ADDED = "news.reaction_added"
    NEWS_REACTION_REMOVED = "news.reaction_removed"

    # Content section events
    SECTION_CREATED = "section.created"
    SECTION_UPDATED = "section.updated"
    SECTION_DELETED = "section.deleted"


class EventLog(Base):
    """
    Immutable audit event log.

    This table is append-only - no updates or deletes allowed.
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )

    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Entity reference
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )

    # Actor (None for system events such as seeding)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
        index=True,
    )

    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_actor_time", "actor_id", "created_at"),
        Index("ix_event_logs_type_time", "event_type", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"
