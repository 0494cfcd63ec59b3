"""
State machine for the avatar moderation lifecycle.

A member proposes a profile image; a moderator or admin approves or rejects
it. Valid transitions and who may trigger them are defined here.

    none ──submit──▶ pending ──approve──▶ approved
                       │  ▲  └──reject───▶ rejected
                       └──┘ resubmit
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.kernel.errors import InvalidInput, NoPendingRequest, Unauthorized
from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.events.event_types import AvatarDecision
from unitportal.kernel.identity.identity_service import PersonnelDirectory
from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.event_log import EventType
from unitportal.kernel.models.personnel import AvatarState, Personnel
from unitportal.kernel.permissions.permission_service import (
    capabilities_of,
    require_content_editor,
    require_member,
    require_self,
)
from unitportal.logging_config import get_logger

logger = get_logger(__name__)


class Gate(str, Enum):
    """Who may trigger a transition."""
    OWNER = "owner"
    CONTENT_EDITOR = "content_editor"


# Valid transitions: (from_state, to_state) -> gate
_TRANSITIONS: Dict[Tuple[AvatarState, AvatarState], Gate] = {
    # Member transitions
    (AvatarState.NONE, AvatarState.PENDING): Gate.OWNER,
    (AvatarState.PENDING, AvatarState.PENDING): Gate.OWNER,
    (AvatarState.APPROVED, AvatarState.PENDING): Gate.OWNER,
    (AvatarState.REJECTED, AvatarState.PENDING): Gate.OWNER,
    # Moderator transitions
    (AvatarState.PENDING, AvatarState.APPROVED): Gate.CONTENT_EDITOR,
    (AvatarState.PENDING, AvatarState.REJECTED): Gate.CONTENT_EDITOR,
}


def valid_transitions(from_state: AvatarState) -> List[AvatarState]:
    """Return list of valid target states from given state."""
    from_state = AvatarState(from_state)
    return [t for (f, t) in _TRANSITIONS if f == from_state]


def can_transition(
    actor: Optional[Personnel],
    record: Personnel,
    from_state: AvatarState,
    to_state: AvatarState,
) -> bool:
    """Check if the caller may move a record's avatar from_state -> to_state."""
    gate = _TRANSITIONS.get((AvatarState(from_state), AvatarState(to_state)))
    if gate is None or actor is None:
        return False
    if gate == Gate.OWNER:
        return capabilities_of(actor).can_act and actor.id == record.id
    return capabilities_of(actor).can_edit_content


@dataclass(frozen=True)
class AvatarRequest:
    """A pending avatar, derived from the personnel record that holds it."""

    personnel_id: uuid.UUID
    nickname: str
    avatar: str
    submitted_at: datetime


class AvatarModeration:
    """Service for avatar submission and review with audit logging."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.directory = PersonnelDirectory(session, clock=clock)
        self.event_store = EventStore(session, clock=clock)

    async def submit_avatar(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        image_ref: str,
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """
        Propose a new profile image for the caller's own record.

        A resubmission while pending replaces the proposal and its timestamp,
        so a member never has more than one queue entry.

        Raises:
            Unauthorized: Guest caller, or someone else's record
            InvalidInput: Blank image, or the image already in use
        """
        require_member(actor)
        record = await self.directory.get(personnel_id)
        require_self(actor, record)

        image_ref = (image_ref or "").strip()
        if not image_ref:
            raise InvalidInput("An image is required", field="avatar")
        if image_ref == record.avatar:
            raise InvalidInput("This image is already your avatar", field="avatar")

        resubmission = record.has_pending_avatar
        self._transition(actor, record, AvatarState.PENDING)
        record.pending_avatar = image_ref
        record.pending_avatar_submitted_at = self.clock()

        await self.event_store.log(
            event_type=EventType.AVATAR_SUBMITTED,
            entity_type="personnel",
            entity_id=record.id,
            actor_id=actor.id,
            payload={"resubmission": resubmission},
            ip_address=ip_address,
        )
        await self.session.flush()
        logger.info(
            "Avatar submitted",
            extra={"personnel_id": str(record.id), "resubmission": resubmission},
        )
        return record

    async def approve(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """Make the pending image the member's avatar."""
        return await self._decide(actor, personnel_id, AvatarState.APPROVED, ip_address)

    async def reject(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """Discard the pending image; the current avatar stays."""
        return await self._decide(actor, personnel_id, AvatarState.REJECTED, ip_address)

    async def pending_queue(self, actor: Optional[Personnel]) -> List[AvatarRequest]:
        """Pending requests, oldest submission first."""
        require_content_editor(actor)

        result = await self.session.execute(
            select(Personnel)
            .where(Personnel.pending_avatar.is_not(None), Personnel.pending_avatar != "")
            .order_by(Personnel.pending_avatar_submitted_at, Personnel.roster_number)
        )
        return [
            AvatarRequest(
                personnel_id=r.id,
                nickname=r.nickname,
                avatar=r.pending_avatar,
                submitted_at=r.pending_avatar_submitted_at,
            )
            for r in result.scalars().all()
        ]

    async def _decide(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        to_state: AvatarState,
        ip_address: Optional[str],
    ) -> Personnel:
        require_content_editor(actor)
        record = await self.directory.get(personnel_id)
        if not record.has_pending_avatar:
            raise NoPendingRequest(f"No pending avatar for {record.nickname}")

        self._transition(actor, record, to_state)
        if to_state == AvatarState.APPROVED:
            record.avatar = record.pending_avatar
        record.pending_avatar = None
        record.pending_avatar_submitted_at = None

        await self.event_store.log_from_model(
            event_type=(
                EventType.AVATAR_APPROVED
                if to_state == AvatarState.APPROVED
                else EventType.AVATAR_REJECTED
            ),
            entity_type="personnel",
            entity_id=record.id,
            actor_id=actor.id,
            payload_model=AvatarDecision(
                personnel_id=record.id,
                decision=to_state.value,
                avatar=record.avatar,
            ),
            ip_address=ip_address,
        )
        await self.session.flush()
        logger.info(
            "Avatar request resolved",
            extra={"personnel_id": str(record.id), "decision": to_state.value},
        )
        return record

    def _transition(
        self,
        actor: Optional[Personnel],
        record: Personnel,
        to_state: AvatarState,
    ) -> None:
        from_state = AvatarState(record.avatar_state)
        if to_state not in valid_transitions(from_state):
            raise InvalidInput(f"Invalid avatar transition: {from_state.value} -> {to_state.value}")
        if not can_transition(actor, record, from_state, to_state):
            raise Unauthorized(
                f"Not allowed to move avatar from {from_state.value} to {to_state.value}"
            )
        record.avatar_state = to_state
