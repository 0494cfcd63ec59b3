"""
Event log infrastructure.

Provides append-only audit logging with immutable events.
"""

from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.events.event_types import (
    BaseEvent,
    RoleChanged,
    AvatarDecision,
    AwardGranted,
    AwardRevoked,
)

__all__ = [
    "EventStore",
    "BaseEvent",
    "RoleChanged",
    "AvatarDecision",
    "AwardGranted",
    "AwardRevoked",
]
