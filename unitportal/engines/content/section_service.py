"""
Content sections for the informational pages (divisions, information items,
charter chapters).
"""

import uuid
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.kernel.errors import InvalidInput, NotFound
from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.content import ContentSection, SectionKind
from unitportal.kernel.models.event_log import EventType
from unitportal.kernel.models.personnel import Personnel
from unitportal.kernel.permissions.permission_service import require_content_editor
from unitportal.logging_config import get_logger

logger = get_logger(__name__)


def parse_kind(value) -> SectionKind:
    try:
        return SectionKind(value)
    except ValueError:
        raise InvalidInput(f"Unknown section kind: {value}", field="kind")


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class SectionService:
    """Service for the editable blocks of the informational pages."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.event_store = EventStore(session, clock=clock)

    async def list_sections(self, kind: SectionKind) -> List[ContentSection]:
        kind = parse_kind(kind)
        result = await self.session.execute(
            select(ContentSection)
            .where(ContentSection.kind == kind.value)
            .order_by(ContentSection.sequence)
        )
        return list(result.scalars().all())

    async def get_section(
        self,
        section_id: uuid.UUID,
        kind: Optional[SectionKind] = None,
    ) -> ContentSection:
        """Get a section by ID, optionally requiring it to belong to a page family."""
        section = await self.session.get(ContentSection, section_id)
        if section is None or (kind is not None and section.kind != parse_kind(kind).value):
            raise NotFound(f"Section not found: {section_id}")
        return section

    async def create_section(
        self,
        actor: Optional[Personnel],
        kind: SectionKind,
        title: str,
        body: str = "",
        icon: Optional[str] = None,
        link: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> ContentSection:
        """Append a section to the end of its page."""
        require_content_editor(actor)
        kind = parse_kind(kind)
        title = (title or "").strip()
        if not title:
            raise InvalidInput("Section title is required", field="title")

        now = self.clock()
        section = ContentSection(
            kind=kind.value,
            sequence=await self._next_sequence(kind),
            title=title,
            body=body or "",
            icon=_optional(icon),
            link=_optional(link),
            created_at=now,
            updated_at=now,
        )
        self.session.add(section)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.SECTION_CREATED,
            entity_type="content_section",
            entity_id=section.id,
            actor_id=actor.id,
            payload={"kind": kind.value, "title": title},
            ip_address=ip_address,
        )
        logger.info("Section created", extra={"section_id": str(section.id), "kind": kind.value})
        return section

    async def update_section(
        self,
        actor: Optional[Personnel],
        section_id: uuid.UUID,
        title: Optional[str] = None,
        body: Optional[str] = None,
        icon: Optional[str] = None,
        link: Optional[str] = None,
        kind: Optional[SectionKind] = None,
        ip_address: Optional[str] = None,
    ) -> ContentSection:
        """Edit a section; omitted fields are left alone, blank icon/link clear them."""
        require_content_editor(actor)
        section = await self.get_section(section_id, kind)

        changed = []
        if title is not None:
            title = title.strip()
            if not title:
                raise InvalidInput("Section title is required", field="title")
            if title != section.title:
                section.title = title
                changed.append("title")
        if body is not None and body != section.body:
            section.body = body
            changed.append("body")
        if icon is not None and _optional(icon) != section.icon:
            section.icon = _optional(icon)
            changed.append("icon")
        if link is not None and _optional(link) != section.link:
            section.link = _optional(link)
            changed.append("link")

        if changed:
            await self.event_store.log(
                event_type=EventType.SECTION_UPDATED,
                entity_type="content_section",
                entity_id=section.id,
                actor_id=actor.id,
                payload={"fields": changed},
                ip_address=ip_address,
            )
            await self.session.flush()
        return section

    async def delete_section(
        self,
        actor: Optional[Personnel],
        section_id: uuid.UUID,
        kind: Optional[SectionKind] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        require_content_editor(actor)
        section = await self.get_section(section_id, kind)

        await self.event_store.log(
            event_type=EventType.SECTION_DELETED,
            entity_type="content_section",
            entity_id=section.id,
            actor_id=actor.id,
            payload={"kind": section.kind, "title": section.title},
            ip_address=ip_address,
        )
        await self.session.delete(section)
        await self.session.flush()

    async def _next_sequence(self, kind: SectionKind) -> int:
        result = await self.session.execute(
            select(func.max(ContentSection.sequence)).where(ContentSection.kind == kind.value)
        )
        return (result.scalar() or 0) + 1
