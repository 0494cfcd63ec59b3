"""
News models - feed posts and their reaction ledger.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unitportal.kernel.models.base import Base, TimestampMixin, UTCDateTime, generate_uuid
from unitportal.kernel.models.personnel import Personnel


class NewsPost(Base, TimestampMixin):
    """
    A published news post.

    The body keeps its lightweight inline markup verbatim; rendering it is
    the client's job. The reaction count is the size of the reaction set.
    """

    __tablename__ = "news_posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    # Feed order (newest first)
    sequence: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    image: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("personnel.id"),
        nullable=False,
        index=True,
    )
    published_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    author: Mapped[Personnel] = relationship(
        Personnel,
        lazy="selectin",
    )
    reactions: Mapped[List["NewsReaction"]] = relationship(
        "NewsReaction",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<NewsPost {self.title!r}>"

    @property
    def reaction_count(self) -> int:
        return len(self.reactions)

    @property
    def reacted_ids(self) -> set:
        return {r.personnel_id for r in self.reactions}


class NewsReaction(Base):
    """A member's reaction to a post; at most one per member and post."""

    __tablename__ = "news_reactions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("news_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    personnel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("personnel.id"),
        nullable=False,
    )
    reacted_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("post_id", "personnel_id", name="uq_news_reaction_member"),
    )
