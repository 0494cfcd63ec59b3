"""
Kernel Data Models

Core SQLAlchemy models: personnel directory, awards, news feed,
content sections and the audit event log.
"""

from unitportal.kernel.models.base import Base, TimestampMixin, UTCDateTime, generate_uuid, utcnow
from unitportal.kernel.models.personnel import Personnel, Role, AvatarState, nickname_key
from unitportal.kernel.models.award import Award, AwardLedgerEntry
from unitportal.kernel.models.news import NewsPost, NewsReaction
from unitportal.kernel.models.content import ContentSection, SectionKind
from unitportal.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "generate_uuid",
    "utcnow",
    # Personnel
    "Personnel",
    "Role",
    "AvatarState",
    "nickname_key",
    # Awards
    "Award",
    "AwardLedgerEntry",
    # News
    "NewsPost",
    "NewsReaction",
    # Content
    "ContentSection",
    "SectionKind",
    # Event Log
    "EventLog",
    "EventType",
]
