"""
News feed endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from unitportal.api.deps import DbSession, OptionalActor, get_client_ip
from unitportal.engines.news.news_feed import NewsFeed
from unitportal.schemas.common import SuccessResponse
from unitportal.schemas.news import NewsCreate, NewsPostResponse, NewsUpdate

router = APIRouter()


@router.get("", response_model=List[NewsPostResponse])
async def list_feed(actor: OptionalActor, db: DbSession):
    """The feed, newest first."""
    posts = await NewsFeed(db).list_feed()
    return [NewsPostResponse.from_post(p, actor) for p in posts]


@router.post("", response_model=NewsPostResponse, status_code=status.HTTP_201_CREATED)
async def publish(
    request: Request,
    data: NewsCreate,
    actor: OptionalActor,
    db: DbSession,
):
    post = await NewsFeed(db).publish(
        actor, data.title, data.body, image=data.image, ip_address=get_client_ip(request)
    )
    return NewsPostResponse.from_post(post, actor)


@router.get("/{post_id}", response_model=NewsPostResponse)
async def get_post(post_id: uuid.UUID, actor: OptionalActor, db: DbSession):
    return NewsPostResponse.from_post(await NewsFeed(db).get_post(post_id), actor)


@router.patch("/{post_id}", response_model=NewsPostResponse)
async def edit_post(
    request: Request,
    post_id: uuid.UUID,
    data: NewsUpdate,
    actor: OptionalActor,
    db: DbSession,
):
    post = await NewsFeed(db).edit(
        actor,
        post_id,
        title=data.title,
        body=data.body,
        image=data.image,
        clear_image=data.clear_image,
        ip_address=get_client_ip(request),
    )
    return NewsPostResponse.from_post(post, actor)


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    request: Request,
    post_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    await NewsFeed(db).delete(actor, post_id, ip_address=get_client_ip(request))
    return SuccessResponse(message="Post deleted")


@router.post("/{post_id}/reactions", response_model=NewsPostResponse)
async def toggle_reaction(
    request: Request,
    post_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    """React to a post, or withdraw your reaction."""
    post, _ = await NewsFeed(db).toggle_reaction(
        actor, post_id, ip_address=get_client_ip(request)
    )
    return NewsPostResponse.from_post(post, actor)
