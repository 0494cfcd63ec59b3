"""
News feed schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from unitportal.kernel.models.news import NewsPost
from unitportal.kernel.models.personnel import Personnel


class NewsCreate(BaseModel):
    """New post. The body may carry inline markup; it is stored verbatim."""

    title: str = Field(..., max_length=255)
    body: str
    image: Optional[str] = None


class NewsUpdate(BaseModel):
    """Post edit; omitted fields stay as they are."""

    title: Optional[str] = Field(None, max_length=255)
    body: Optional[str] = None
    image: Optional[str] = None
    clear_image: bool = False


class NewsPostResponse(BaseModel):
    """A post as seen by one caller."""

    id: uuid.UUID
    title: str
    body: str
    image: Optional[str] = None
    author_id: uuid.UUID
    author_nickname: str
    published_at: datetime
    reaction_count: int
    reacted: bool = False

    @classmethod
    def from_post(cls, post: NewsPost, viewer: Optional[Personnel] = None) -> "NewsPostResponse":
        return cls(
            id=post.id,
            title=post.title,
            body=post.body,
            image=post.image,
            author_id=post.author_id,
            author_nickname=post.author.nickname,
            published_at=post.published_at,
            reaction_count=post.reaction_count,
            reacted=viewer is not None and viewer.id in post.reacted_ids,
        )
