"""
News Feed & Reaction Ledger.

Posts are shown newest first. Each member may react to a post at most once;
reacting again withdraws the reaction.
"""

import uuid
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.kernel.errors import InvalidInput, NotFound
from unitportal.kernel.events.event_store import EventStore
from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.event_log import EventType
from unitportal.kernel.models.news import NewsPost, NewsReaction
from unitportal.kernel.models.personnel import Personnel
from unitportal.kernel.permissions.permission_service import require_content_editor, require_member
from unitportal.logging_config import get_logger

logger = get_logger(__name__)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field.capitalize()} must not be blank", field=field)
    return value


class NewsFeed:
    """Service for publishing news and recording reactions."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock
        self.event_store = EventStore(session, clock=clock)

    async def list_feed(self) -> List[NewsPost]:
        """All posts, newest first."""
        result = await self.session.execute(
            select(NewsPost).order_by(NewsPost.sequence.desc())
        )
        return list(result.scalars().all())

    async def get_post(self, post_id: uuid.UUID) -> NewsPost:
        post = await self.session.get(NewsPost, post_id)
        if post is None:
            raise NotFound(f"News post not found: {post_id}")
        return post

    async def publish(
        self,
        actor: Optional[Personnel],
        title: str,
        body: str,
        image: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> NewsPost:
        """
        Publish a post at the top of the feed.

        The body is stored exactly as given, inline markup included.

        Raises:
            Unauthorized: Caller is not a moderator or admin
            InvalidInput: Blank title or body
        """
        require_content_editor(actor)
        title = _require_text(title, "title").strip()
        body = _require_text(body, "body")

        now = self.clock()
        post = NewsPost(
            sequence=await self._next_sequence(),
            title=title,
            body=body,
            image=(image or "").strip() or None,
            author_id=actor.id,
            author=actor,
            published_at=now,
            reactions=[],
            created_at=now,
            updated_at=now,
        )
        self.session.add(post)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.NEWS_PUBLISHED,
            entity_type="news_post",
            entity_id=post.id,
            actor_id=actor.id,
            payload={"title": title, "has_image": post.image is not None},
            ip_address=ip_address,
        )
        logger.info("News published", extra={"post_id": str(post.id)})
        return post

    async def edit(
        self,
        actor: Optional[Personnel],
        post_id: uuid.UUID,
        title: Optional[str] = None,
        body: Optional[str] = None,
        image: Optional[str] = None,
        clear_image: bool = False,
        ip_address: Optional[str] = None,
    ) -> NewsPost:
        """
        Edit a post in place; omitted fields are left alone.

        A new image replaces the old one, clear_image removes it. Reactions
        and feed position are kept.
        """
        require_content_editor(actor)
        post = await self.get_post(post_id)

        new_title = _require_text(title, "title").strip() if title is not None else None
        new_body = _require_text(body, "body") if body is not None else None

        changed = []
        if new_title is not None and new_title != post.title:
            post.title = new_title
            changed.append("title")
        if new_body is not None and new_body != post.body:
            post.body = new_body
            changed.append("body")
        if clear_image:
            if post.image is not None:
                post.image = None
                changed.append("image")
        elif image is not None and image.strip() and image.strip() != post.image:
            post.image = image.strip()
            changed.append("image")

        if changed:
            await self.event_store.log(
                event_type=EventType.NEWS_EDITED,
                entity_type="news_post",
                entity_id=post.id,
                actor_id=actor.id,
                payload={"fields": changed},
                ip_address=ip_address,
            )
            await self.session.flush()
        return post

    async def delete(
        self,
        actor: Optional[Personnel],
        post_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        """Remove a post together with its reactions."""
        require_content_editor(actor)
        post = await self.get_post(post_id)

        await self.event_store.log(
            event_type=EventType.NEWS_DELETED,
            entity_type="news_post",
            entity_id=post.id,
            actor_id=actor.id,
            payload={"title": post.title, "reactions": post.reaction_count},
            ip_address=ip_address,
        )
        await self.session.delete(post)
        await self.session.flush()
        logger.info("News deleted", extra={"post_id": str(post_id)})

    async def toggle_reaction(
        self,
        actor: Optional[Personnel],
        post_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> Tuple[NewsPost, bool]:
        """
        Add the caller's reaction, or withdraw it if already present.

        Returns:
            Tuple of (post, whether the caller now reacts to it)
        """
        member = require_member(actor)
        post = await self.get_post(post_id)

        existing = next((r for r in post.reactions if r.personnel_id == member.id), None)
        if existing is None:
            post.reactions.append(
                NewsReaction(personnel_id=member.id, reacted_at=self.clock())
            )
            event_type = EventType.NEWS_REACTION_ADDED
        else:
            post.reactions.remove(existing)
            event_type = EventType.NEWS_REACTION_REMOVED
        await self.session.flush()

        await self.event_store.log(
            event_type=event_type,
            entity_type="news_post",
            entity_id=post.id,
            actor_id=member.id,
            payload={"reactions": post.reaction_count},
            ip_address=ip_address,
        )
        return post, existing is None

    async def _next_sequence(self) -> int:
        result = await self.session.execute(select(func.max(NewsPost.sequence)))
        return (result.scalar() or 0) + 1
