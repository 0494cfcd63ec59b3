"""
Avatar moderation endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from unitportal.api.deps import DbSession, OptionalActor, get_client_ip
from unitportal.orchestration.state_machine import AvatarModeration
from unitportal.schemas.avatar import AvatarRequestResponse, AvatarSubmit
from unitportal.schemas.common import SuccessResponse

router = APIRouter()


@router.post(
    "/personnel/{personnel_id}/avatar",
    response_model=AvatarRequestResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_avatar(
    request: Request,
    personnel_id: uuid.UUID,
    data: AvatarSubmit,
    actor: OptionalActor,
    db: DbSession,
):
    """Propose a new avatar for your own record; it waits for moderation."""
    record = await AvatarModeration(db).submit_avatar(
        actor,
        personnel_id,
        data.image,
        ip_address=get_client_ip(request),
    )
    return AvatarRequestResponse(
        personnel_id=record.id,
        nickname=record.nickname,
        avatar=record.pending_avatar,
        submitted_at=record.pending_avatar_submitted_at,
    )


@router.get("/avatars/pending", response_model=List[AvatarRequestResponse])
async def pending_avatars(actor: OptionalActor, db: DbSession):
    """Moderation queue, oldest submission first."""
    queue = await AvatarModeration(db).pending_queue(actor)
    return [AvatarRequestResponse.model_validate(item) for item in queue]


@router.post("/avatars/{personnel_id}/approve", response_model=SuccessResponse)
async def approve_avatar(
    request: Request,
    personnel_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    record = await AvatarModeration(db).approve(
        actor, personnel_id, ip_address=get_client_ip(request)
    )
    return SuccessResponse(message="Avatar approved", data={"avatar": record.avatar})


@router.post("/avatars/{personnel_id}/reject", response_model=SuccessResponse)
async def reject_avatar(
    request: Request,
    personnel_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    record = await AvatarModeration(db).reject(
        actor, personnel_id, ip_address=get_client_ip(request)
    )
    return SuccessResponse(message="Avatar rejected", data={"avatar": record.avatar})
