"""
Awards Registry - award catalog and per-award recipient ledgers.

The ledger is the single source of truth for who holds what; a member's
award list is read from it. Each grant emits AwardGranted to the event log
for collaborators that display badges.
"""

import uuid
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.kernel.errors import AlreadyAwarded, InvalidInput, NotAwarded, NotFound
from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.events.event_types import AwardGranted, AwardRevoked
from unitportal.kernel.identity.identity_service import PersonnelDirectory
from unitportal.kernel.models.award import Award, AwardLedgerEntry
from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.event_log import EventType
from unitportal.kernel.models.personnel import Personnel
from unitportal.kernel.permissions.permission_service import require_content_editor
from unitportal.logging_config import get_logger

logger = get_logger(__name__)


class AwardsRegistry:
    """Service for creating awards and issuing them to members."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.directory = PersonnelDirectory(session, clock=clock)
        self.event_store = EventStore(session, clock=clock)

    async def list_awards(self) -> List[Award]:
        """All awards in catalog order, ledgers included."""
        result = await self.session.execute(select(Award).order_by(Award.sequence))
        return list(result.scalars().all())

    async def get_award(self, award_id: uuid.UUID) -> Award:
        award = await self.session.get(Award, award_id)
        if award is None:
            raise NotFound(f"Award not found: {award_id}")
        return award

    async def awards_for(self, personnel_id: uuid.UUID) -> List[Award]:
        """Awards a member holds, in the order they were granted."""
        await self.directory.get(personnel_id)
        result = await self.session.execute(
            select(Award)
            .join(AwardLedgerEntry, AwardLedgerEntry.award_id == Award.id)
            .where(AwardLedgerEntry.recipient_id == personnel_id)
            .order_by(AwardLedgerEntry.granted_at, Award.sequence)
        )
        return list(result.scalars().all())

    async def create_award(
        self,
        actor: Optional[Personnel],
        name: str,
        icon: str,
        ip_address: Optional[str] = None,
    ) -> Award:
        """
        Add an award to the catalog with an empty ledger.

        Raises:
            Unauthorized: Caller is not a moderator or admin
            InvalidInput: Blank name or icon
        """
        require_content_editor(actor)

        name = (name or "").strip()
        icon = (icon or "").strip()
        if not name:
            raise InvalidInput("Award name is required", field="name")
        if not icon:
            raise InvalidInput("Award icon is required", field="icon")

        now = self.clock()
        award = Award(
            sequence=await self._next_sequence(),
            name=name,
            icon=icon,
            ledger=[],
            created_at=now,
            updated_at=now,
        )
        self.session.add(award)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.AWARD_CREATED,
            entity_type="award",
            entity_id=award.id,
            actor_id=actor.id,
            payload={"name": name, "icon": icon},
            ip_address=ip_address,
        )
        logger.info("Award created", extra={"award_id": str(award.id)})
        return award

    async def delete_award(
        self,
        actor: Optional[Personnel],
        award_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        """Remove an award together with its ledger."""
        require_content_editor(actor)
        award = await self.get_award(award_id)

        await self.event_store.log(
            event_type=EventType.AWARD_DELETED,
            entity_type="award",
            entity_id=award.id,
            actor_id=actor.id,
            payload={
                "name": award.name,
                "recipients": [entry.recipient_id for entry in award.ledger],
            },
            ip_address=ip_address,
        )
        await self.session.delete(award)
        await self.session.flush()
        logger.info("Award deleted", extra={"award_id": str(award_id)})

    async def grant(
        self,
        actor: Optional[Personnel],
        award_id: uuid.UUID,
        recipient_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Award:
        """
        Issue an award to a member.

        Raises:
            Unauthorized: Caller is not a moderator or admin
            NotFound: Unknown award or member
            AlreadyAwarded: The member already holds this award
        """
        require_content_editor(actor)
        award = await self.get_award(award_id)
        recipient = await self.directory.get(recipient_id)

        if award.entry_for(recipient.id) is not None:
            raise AlreadyAwarded(f"{recipient.nickname} already holds {award.name}")

        award.ledger.append(
            AwardLedgerEntry(
                recipient_id=recipient.id,
                recipient=recipient,
                granted_at=self.clock(),
            )
        )
        await self.session.flush()

        await self.event_store.log_from_model(
            event_type=EventType.AWARD_GRANTED,
            entity_type="award",
            entity_id=award.id,
            actor_id=actor.id,
            payload_model=AwardGranted(
                recipient_id=recipient.id,
                award_id=award.id,
                award_name=award.name,
                award_icon=award.icon,
            ),
            ip_address=ip_address,
        )
        logger.info(
            "Award granted",
            extra={"award_id": str(award.id), "recipient_id": str(recipient.id)},
        )
        return award

    async def revoke(
        self,
        actor: Optional[Personnel],
        award_id: uuid.UUID,
        recipient_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Award:
        """Withdraw an award; NotAwarded if the member does not hold it."""
        require_content_editor(actor)
        award = await self.get_award(award_id)

        entry = award.entry_for(recipient_id)
        if entry is None:
            raise NotAwarded(f"Recipient {recipient_id} does not hold {award.name}")

        award.ledger.remove(entry)
        await self.session.flush()

        await self.event_store.log_from_model(
            event_type=EventType.AWARD_REVOKED,
            entity_type="award",
            entity_id=award.id,
            actor_id=actor.id,
            payload_model=AwardRevoked(
                recipient_id=recipient_id,
                award_id=award.id,
                award_name=award.name,
            ),
            ip_address=ip_address,
        )
        logger.info(
            "Award revoked",
            extra={"award_id": str(award.id), "recipient_id": str(recipient_id)},
        )
        return award

    async def eligible_recipients(
        self,
        actor: Optional[Personnel],
        award_id: uuid.UUID,
    ) -> List[Personnel]:
        """Members who do not yet hold the award, in roster order."""
        require_content_editor(actor)
        award = await self.get_award(award_id)

        holders = {entry.recipient_id for entry in award.ledger}
        return [p for p in await self.directory.list_all() if p.id not in holders]

    async def _next_sequence(self) -> int:
        result = await self.session.execute(select(func.max(Award.sequence)))
        return (result.scalar() or 0) + 1
