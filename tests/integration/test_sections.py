"""Integration tests for editable informational page sections."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.engines.content import SectionService
from unitportal.kernel.errors import InvalidInput, NotFound, Unauthorized
from unitportal.kernel.models.content import SectionKind
from unitportal.kernel.models.personnel import Personnel


class TestSections:

    @pytest.mark.asyncio
    async def test_sections_are_kept_per_page_in_order(
        self, db_session: AsyncSession, moderator: Personnel
    ):
        service = SectionService(db_session)
        first = await service.create_section(moderator, SectionKind.CHARTER, "Глава 1", "Общие положения")
        second = await service.create_section(moderator, SectionKind.CHARTER, "Глава 2", "Права")
        await service.create_section(moderator, SectionKind.DIVISION, "Штаб", icon="🏛️")

        charter = await service.list_sections(SectionKind.CHARTER)
        assert [s.id for s in charter] == [first.id, second.id]
        assert [s.sequence for s in charter] == [1, 2]
        assert len(await service.list_sections(SectionKind.DIVISION)) == 1
        assert await service.list_sections(SectionKind.INFO) == []

    @pytest.mark.asyncio
    async def test_unknown_kind(self, db_session: AsyncSession):
        with pytest.raises(InvalidInput) as exc:
            await SectionService(db_session).list_sections("armory")
        assert exc.value.field == "kind"

    @pytest.mark.asyncio
    async def test_update_clears_blank_link(self, db_session: AsyncSession, moderator: Personnel):
        service = SectionService(db_session)
        section = await service.create_section(
            moderator, SectionKind.INFO, "Discord", "Наш сервер", link="https://discord.gg/example"
        )

        updated = await service.update_section(moderator, section.id, body="Новый текст", link="  ")

        assert updated.body == "Новый текст"
        assert updated.link is None
        assert updated.title == "Discord"

    @pytest.mark.asyncio
    async def test_kind_mismatch_is_not_found(self, db_session: AsyncSession, moderator: Personnel):
        service = SectionService(db_session)
        section = await service.create_section(moderator, SectionKind.INFO, "Discord")

        with pytest.raises(NotFound):
            await service.update_section(moderator, section.id, title="x", kind=SectionKind.CHARTER)

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, db_session: AsyncSession, moderator: Personnel):
        service = SectionService(db_session)
        with pytest.raises(InvalidInput):
            await service.create_section(moderator, SectionKind.INFO, "   ")

    @pytest.mark.asyncio
    async def test_member_cannot_edit(self, db_session: AsyncSession, moderator, member: Personnel):
        service = SectionService(db_session)
        section = await service.create_section(moderator, SectionKind.INFO, "Discord")

        with pytest.raises(Unauthorized):
            await service.update_section(member, section.id, title="Взлом")
        with pytest.raises(Unauthorized):
            await service.delete_section(member, section.id)

    @pytest.mark.asyncio
    async def test_delete(self, db_session: AsyncSession, moderator: Personnel):
        service = SectionService(db_session)
        section = await service.create_section(moderator, SectionKind.DIVISION, "Штаб")

        await service.delete_section(moderator, section.id, kind=SectionKind.DIVISION)

        assert await service.list_sections(SectionKind.DIVISION) == []
