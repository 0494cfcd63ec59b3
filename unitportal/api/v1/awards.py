"""
Award endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from unitportal.api.deps import DbSession, OptionalActor, get_client_ip
from unitportal.engines.awards.awards_registry import AwardsRegistry
from unitportal.schemas.award import AwardCreate, AwardGrantRequest, AwardResponse
from unitportal.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=List[AwardResponse])
async def list_awards(db: DbSession):
    """All awards with their recipients."""
    return [AwardResponse.from_award(a) for a in await AwardsRegistry(db).list_awards()]


@router.post("", response_model=AwardResponse, status_code=status.HTTP_201_CREATED)
async def create_award(
    request: Request,
    data: AwardCreate,
    actor: OptionalActor,
    db: DbSession,
):
    award = await AwardsRegistry(db).create_award(
        actor, data.name, data.icon, ip_address=get_client_ip(request)
    )
    return AwardResponse.from_award(award)


@router.get("/{award_id}", response_model=AwardResponse)
async def get_award(award_id: uuid.UUID, db: DbSession):
    return AwardResponse.from_award(await AwardsRegistry(db).get_award(award_id))


@router.delete("/{award_id}", response_model=SuccessResponse)
async def delete_award(
    request: Request,
    award_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    await AwardsRegistry(db).delete_award(actor, award_id, ip_address=get_client_ip(request))
    return SuccessResponse(message="Award deleted")


@router.get("/{award_id}/eligible-recipients")
async def eligible_recipients(
    award_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    """Members who can still receive the award."""
    records = await AwardsRegistry(db).eligible_recipients(actor, award_id)
    return [{"id": r.id, "nickname": r.nickname} for r in records]


@router.post("/{award_id}/recipients", response_model=AwardResponse)
async def grant_award(
    request: Request,
    award_id: uuid.UUID,
    data: AwardGrantRequest,
    actor: OptionalActor,
    db: DbSession,
):
    award = await AwardsRegistry(db).grant(
        actor, award_id, data.recipient_id, ip_address=get_client_ip(request)
    )
    return AwardResponse.from_award(award)


@router.delete("/{award_id}/recipients/{recipient_id}", response_model=AwardResponse)
async def revoke_award(
    request: Request,
    award_id: uuid.UUID,
    recipient_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    award = await AwardsRegistry(db).revoke(
        actor, award_id, recipient_id, ip_address=get_client_ip(request)
    )
    return AwardResponse.from_award(award)
