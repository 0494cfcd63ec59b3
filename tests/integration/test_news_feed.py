"""Integration tests for the news feed and reaction ledger."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.engines.news import NewsFeed
from unitportal.kernel.errors import InvalidInput, NotFound, Unauthorized
from unitportal.kernel.models.personnel import Personnel

from tests.conftest import NOW


BODY_WITH_MARKUP = "Сбор в **субботу в 20:00**.\nФорма одежды: *полевая*."


class TestPublishing:

    @pytest.mark.asyncio
    async def test_publish_keeps_body_verbatim(
        self, db_session: AsyncSession, moderator: Personnel, clock
    ):
        post = await NewsFeed(db_session, clock=clock).publish(
            moderator, "  Общий сбор ", BODY_WITH_MARKUP
        )

        assert post.title == "Общий сбор"
        assert post.body == BODY_WITH_MARKUP
        assert post.author_id == moderator.id
        assert post.published_at == NOW
        assert post.image is None
        assert post.reaction_count == 0

    @pytest.mark.asyncio
    async def test_feed_is_newest_first(self, db_session: AsyncSession, moderator: Personnel):
        feed = NewsFeed(db_session)
        older = await feed.publish(moderator, "Первая", "текст")
        newer = await feed.publish(moderator, "Вторая", "текст")

        assert [p.id for p in await feed.list_feed()] == [newer.id, older.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title, body, field", [("  ", "текст", "title"), ("Заголовок", "\n", "body")])
    async def test_blank_fields_rejected(
        self, db_session: AsyncSession, moderator: Personnel, title, body, field
    ):
        with pytest.raises(InvalidInput) as exc:
            await NewsFeed(db_session).publish(moderator, title, body)
        assert exc.value.field == field

    @pytest.mark.asyncio
    async def test_member_cannot_publish(self, db_session: AsyncSession, member: Personnel):
        with pytest.raises(Unauthorized):
            await NewsFeed(db_session).publish(member, "Новость", "текст")

    @pytest.mark.asyncio
    async def test_guest_cannot_publish(self, db_session: AsyncSession):
        with pytest.raises(Unauthorized) as exc:
            await NewsFeed(db_session).publish(None, "Новость", "текст")
        assert exc.value.unauthenticated
        assert await NewsFeed(db_session).list_feed() == []

    @pytest.mark.asyncio
    async def test_edit_keeps_reactions_and_position(
        self, db_session: AsyncSession, moderator: Personnel, member: Personnel
    ):
        feed = NewsFeed(db_session)
        first = await feed.publish(moderator, "Первая", "текст", image="old.png")
        second = await feed.publish(moderator, "Вторая", "текст")
        await feed.toggle_reaction(member, first.id)

        edited = await feed.edit(moderator, first.id, title="Исправлено", image="new.png")

        assert edited.title == "Исправлено"
        assert edited.body == "текст"
        assert edited.image == "new.png"
        assert edited.reaction_count == 1
        assert [p.id for p in await feed.list_feed()] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_clear_image(self, db_session: AsyncSession, moderator: Personnel):
        feed = NewsFeed(db_session)
        post = await feed.publish(moderator, "С фото", "текст", image="photo.png")

        edited = await feed.edit(moderator, post.id, clear_image=True)

        assert edited.image is None

    @pytest.mark.asyncio
    async def test_delete(self, db_session: AsyncSession, moderator: Personnel, member: Personnel):
        feed = NewsFeed(db_session)
        post = await feed.publish(moderator, "Удалить", "текст")
        await feed.toggle_reaction(member, post.id)

        await feed.delete(moderator, post.id)

        assert await feed.list_feed() == []
        with pytest.raises(NotFound):
            await feed.get_post(post.id)


class TestReactions:

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_count(
        self, db_session: AsyncSession, moderator: Personnel, member: Personnel
    ):
        feed = NewsFeed(db_session)
        post = await feed.publish(moderator, "Новость", "текст")

        post, reacted = await feed.toggle_reaction(member, post.id)
        assert reacted is True
        assert post.reaction_count == 1
        assert member.id in post.reacted_ids

        post, reacted = await feed.toggle_reaction(member, post.id)
        assert reacted is False
        assert post.reaction_count == 0

    @pytest.mark.asyncio
    async def test_count_is_distinct_members(
        self, db_session: AsyncSession, admin: Personnel, moderator: Personnel, member: Personnel
    ):
        feed = NewsFeed(db_session)
        post = await feed.publish(moderator, "Новость", "текст")
        for reactor in (admin, moderator, member):
            await feed.toggle_reaction(reactor, post.id)

        assert post.reaction_count == 3
        assert post.reacted_ids == {admin.id, moderator.id, member.id}

    @pytest.mark.asyncio
    async def test_guest_cannot_react(self, db_session: AsyncSession, moderator: Personnel):
        feed = NewsFeed(db_session)
        post = await feed.publish(moderator, "Новость", "текст")

        with pytest.raises(Unauthorized) as exc:
            await feed.toggle_reaction(None, post.id)
        assert exc.value.unauthenticated
        assert post.reaction_count == 0
