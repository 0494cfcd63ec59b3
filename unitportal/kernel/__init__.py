"""
Kernel Layer

Foundational components shared by every portal feature:
- Personnel directory and access-code identity
- Role authorization model (capabilities per role)
- Immutable event log (all mutations logged)

Invariants:
- Every mutating operation re-checks the caller's role before touching state
- All state changes logged in the same transaction; logs immutable
"""

from unitportal.kernel.models import (
    Personnel,
    Role,
    AvatarState,
    Award,
    AwardLedgerEntry,
    NewsPost,
    NewsReaction,
    ContentSection,
    SectionKind,
    EventLog,
    EventType,
)

__all__ = [
    "Personnel",
    "Role",
    "AvatarState",
    "Award",
    "AwardLedgerEntry",
    "NewsPost",
    "NewsReaction",
    "ContentSection",
    "SectionKind",
    "EventLog",
    "EventType",
]
