"""
Personnel directory - member records, access-code sign-in and assignments.
"""

import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.engines.promotion import is_promotion_due, rank_label, to_rank
from unitportal.config import get_settings
from unitportal.kernel.errors import DuplicateIdentity, InvalidInput, NotFound
from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.events.event_types import RoleChanged
from unitportal.kernel.identity.access_codes import generate_access_code, normalize_access_code
from unitportal.kernel.models.award import Award, AwardLedgerEntry
from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.event_log import EventType
from unitportal.kernel.models.personnel import Personnel, Role, nickname_key
from unitportal.kernel.permissions.permission_service import (
    Page,
    require_admin,
    require_content_editor,
    require_member,
    require_page,
    require_self,
)
from unitportal.logging_config import get_logger

logger = get_logger(__name__)

MAX_ACCESS_CODE_ATTEMPTS = 20


def parse_role(value) -> Role:
    """Parse a role for a stored record; guest is not a storable role."""
    try:
        role = Role(value)
    except ValueError:
        raise InvalidInput(f"Unknown role: {value}", field="role")
    if role == Role.GUEST:
        raise InvalidInput("A directory record cannot have the guest role", field="role")
    return role


class PersonnelDirectory:
    """
    Service for the unit's personnel records.

    Handles registration, sign-in by access code, assignment changes and
    roster search. Promotion eligibility is derived on every read.
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.event_store = EventStore(session, clock=clock)

    async def register(
        self,
        actor: Optional[Personnel],
        nickname: str,
        rank: int,
        position: str,
        role: Role = Role.USER,
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """
        Register a new member (admin only).

        Args:
            actor: The caller
            nickname: In-game nickname, unique in the directory
            rank: Ladder index
            position: Free-text position title
            role: Authorization level
            ip_address: Client IP for audit

        Returns:
            The created record, with a freshly generated access code

        Raises:
            Unauthorized: Caller is not an admin
            InvalidInput: Blank nickname, rank off the ladder or guest role
            DuplicateIdentity: Nickname already in the directory
        """
        require_admin(actor)

        nickname = (nickname or "").strip()
        if not nickname:
            raise InvalidInput("Nickname is required", field="nickname")
        new_rank = to_rank(rank)
        new_role = parse_role(role)
        position = (position or "").strip()

        if await self.get_by_nickname(nickname):
            raise DuplicateIdentity(f"Nickname already registered: {nickname}")

        now = self.clock()
        record = Personnel(
            roster_number=await self._next_roster_number(),
            access_code=await self._unique_access_code(),
            nickname=nickname,
            nickname_key=nickname_key(nickname),
            rank=int(new_rank),
            rank_changed_at=now,
            position=position,
            position_changed_at=now,
            role=new_role,
            created_at=now,
            updated_at=now,
        )
        self.session.add(record)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.PERSONNEL_REGISTERED,
            entity_type="personnel",
            entity_id=record.id,
            actor_id=actor.id,
            payload={
                "nickname": nickname,
                "rank": int(new_rank),
                "position": position,
                "role": new_role.value,
            },
            ip_address=ip_address,
        )
        logger.info(
            "Personnel registered",
            extra={"personnel_id": str(record.id), "roster_number": record.roster_number},
        )
        return record

    async def authenticate(
        self,
        access_code: str,
        ip_address: Optional[str] = None,
    ) -> Optional[Personnel]:
        """
        Resolve a presented access code to a member.

        Returns:
            The matching record, or None if the code is unknown
        """
        code = normalize_access_code(access_code or "")
        if not code:
            return None

        result = await self.session.execute(
            select(Personnel).where(Personnel.access_code == code)
        )
        record = result.scalar_one_or_none()
        if record is None:
            logger.warning("Sign-in with unknown access code", extra={"ip_address": ip_address})
            return None

        await self.event_store.log(
            event_type=EventType.PERSONNEL_LOGGED_IN,
            entity_type="personnel",
            entity_id=record.id,
            actor_id=record.id,
            payload={"method": "access_code"},
            ip_address=ip_address,
        )
        return record

    async def get_optional(self, personnel_id: uuid.UUID) -> Optional[Personnel]:
        """Get a record by ID, or None."""
        return await self.session.get(Personnel, personnel_id)

    async def get(self, personnel_id: uuid.UUID) -> Personnel:
        """Get a record by ID or raise NotFound."""
        record = await self.get_optional(personnel_id)
        if record is None:
            raise NotFound(f"Personnel record not found: {personnel_id}")
        return record

    async def view(self, actor: Optional[Personnel], personnel_id: uuid.UUID) -> Personnel:
        """A member may always see their own record; others need the personnel page."""
        if actor is None or actor.id != personnel_id:
            require_page(actor, Page.PERSONNEL)
        return await self.get(personnel_id)

    async def get_by_nickname(self, nickname: str) -> Optional[Personnel]:
        result = await self.session.execute(
            select(Personnel).where(Personnel.nickname_key == nickname_key(nickname))
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Personnel]:
        """All records in roster order."""
        result = await self.session.execute(
            select(Personnel).order_by(Personnel.roster_number)
        )
        return list(result.scalars().all())

    async def search(self, actor: Optional[Personnel], term: str = "") -> List[Personnel]:
        """
        Case-insensitive substring search over nickname and rank name.

        Keeps roster order; a blank term returns everyone.
        """
        require_page(actor, Page.PERSONNEL)

        records = await self.list_all()
        needle = (term or "").strip().casefold()
        if not needle:
            return records
        return [
            r for r in records
            if needle in r.nickname.casefold() or needle in rank_label(r.rank).casefold()
        ]

    async def update_assignment(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        rank: Optional[int] = None,
        position: Optional[str] = None,
        role: Optional[Role] = None,
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """
        Change a member's rank, position and/or role.

        Role changes need an admin; rank and position changes need a moderator
        or admin. A changed rank restarts the time-in-rank clock; a changed
        position restarts its own clock. Unchanged values keep their timestamps.
        """
        if role is not None:
            require_admin(actor)
        if role is None or rank is not None or position is not None:
            require_content_editor(actor)

        record = await self.get(personnel_id)
        new_rank = to_rank(rank) if rank is not None else None
        new_role = parse_role(role) if role is not None else None
        new_position = position.strip() if position is not None else None

        now = self.clock()
        changes: Dict[str, Dict[str, object]] = {}

        if new_rank is not None and int(new_rank) != record.rank:
            changes["rank"] = {"from": record.rank, "to": int(new_rank)}
            record.rank = int(new_rank)
            record.rank_changed_at = now

        if new_position is not None and new_position != record.position:
            changes["position"] = {"from": record.position, "to": new_position}
            record.position = new_position
            record.position_changed_at = now

        if new_role is not None and new_role != Role(record.role):
            previous_role = Role(record.role)
            record.role = new_role
            await self.event_store.log_from_model(
                event_type=EventType.PERSONNEL_ROLE_CHANGED,
                entity_type="personnel",
                entity_id=record.id,
                actor_id=actor.id,
                payload_model=RoleChanged(
                    previous_role=previous_role.value,
                    new_role=new_role.value,
                ),
                ip_address=ip_address,
            )
            logger.info(
                "Role changed",
                extra={"personnel_id": str(record.id), "role": new_role.value},
            )

        if changes:
            await self.event_store.log(
                event_type=EventType.PERSONNEL_ASSIGNMENT_CHANGED,
                entity_type="personnel",
                entity_id=record.id,
                actor_id=actor.id,
                payload=changes,
                ip_address=ip_address,
            )

        await self.session.flush()
        return record

    async def update_profile(
        self,
        actor: Optional[Personnel],
        personnel_id: uuid.UUID,
        bio: Optional[str],
        ip_address: Optional[str] = None,
    ) -> Personnel:
        """Update the biography on the caller's own record; blank clears it."""
        require_member(actor)
        record = await self.get(personnel_id)
        require_self(actor, record)

        bio = (bio or "").strip() or None
        if bio != record.bio:
            record.bio = bio
            await self.event_store.log(
                event_type=EventType.PROFILE_UPDATED,
                entity_type="personnel",
                entity_id=record.id,
                actor_id=actor.id,
                payload={"bio_length": len(bio or "")},
                ip_address=ip_address,
            )
            await self.session.flush()
        return record

    def is_promotion_due(self, record: Personnel, now: Optional[datetime] = None) -> bool:
        return is_promotion_due(record.rank, record.rank_changed_at, now or self.clock())

    async def promotion_due_flag(
        self,
        personnel_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> bool:
        """Whether a member is due for promotion at the given (or current) time."""
        record = await self.get(personnel_id)
        return self.is_promotion_due(record, now)

    async def awards_held(self, personnel_id: uuid.UUID) -> List[str]:
        """Names of awards a member holds, in the order they were granted."""
        await self.get(personnel_id)
        held = await self.awards_held_by([personnel_id])
        return held[personnel_id]

    async def awards_held_by(self, personnel_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[str]]:
        """Names of awards held per member, in the order they were granted."""
        held: Dict[uuid.UUID, List[str]] = {pid: [] for pid in personnel_ids}
        if not personnel_ids:
            return held

        result = await self.session.execute(
            select(AwardLedgerEntry.recipient_id, Award.name)
            .join(Award, AwardLedgerEntry.award_id == Award.id)
            .where(AwardLedgerEntry.recipient_id.in_(personnel_ids))
            .order_by(AwardLedgerEntry.granted_at)
        )
        for recipient_id, name in result.all():
            held[recipient_id].append(name)
        return held

    async def _next_roster_number(self) -> int:
        result = await self.session.execute(select(func.max(Personnel.roster_number)))
        return (result.scalar() or 0) + 1

    async def _unique_access_code(self) -> str:
        length = get_settings().access_code_length
        for _ in range(MAX_ACCESS_CODE_ATTEMPTS):
            code = generate_access_code(length)
            result = await self.session.execute(
                select(Personnel.id).where(Personnel.access_code == code)
            )
            if result.scalar_one_or_none() is None:
                return code
        raise RuntimeError("Could not generate a unique access code")
