"""
Personnel directory endpoints.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from unitportal.api.deps import DbSession, OptionalActor, get_client_ip
from unitportal.engines.promotion import days_until_due, elapsed_days, rank_label, required_days
from unitportal.kernel.identity.identity_service import PersonnelDirectory
from unitportal.kernel.models.personnel import Personnel
from unitportal.kernel.permissions.permission_service import capabilities_of
from unitportal.schemas.personnel import (
    AssignmentUpdate,
    PersonnelCreate,
    PersonnelResponse,
    ProfileUpdate,
    PromotionStatusResponse,
)

router = APIRouter()


async def _to_responses(
    directory: PersonnelDirectory,
    records: List[Personnel],
    viewer: Optional[Personnel],
) -> List[PersonnelResponse]:
    awards = await directory.awards_held_by([r.id for r in records])
    show_codes = capabilities_of(viewer).is_admin
    now = directory.clock()
    return [
        PersonnelResponse.from_record(
            r,
            awards=awards[r.id],
            promotion_due=directory.is_promotion_due(r, now),
            show_access_code=show_codes,
        )
        for r in records
    ]


@router.get("", response_model=List[PersonnelResponse])
async def list_personnel(
    actor: OptionalActor,
    db: DbSession,
    search: str = Query("", max_length=100),
):
    """List the directory in roster order, optionally filtered by nickname or rank."""
    directory = PersonnelDirectory(db)
    records = await directory.search(actor, search)
    return await _to_responses(directory, records, actor)


@router.post("", response_model=PersonnelResponse, status_code=status.HTTP_201_CREATED)
async def register_personnel(
    request: Request,
    data: PersonnelCreate,
    actor: OptionalActor,
    db: DbSession,
):
    """Register a new member. The response carries the generated access code."""
    directory = PersonnelDirectory(db)
    record = await directory.register(
        actor,
        nickname=data.nickname,
        rank=data.rank,
        position=data.position,
        role=data.role,
        ip_address=get_client_ip(request),
    )
    return (await _to_responses(directory, [record], actor))[0]


@router.get("/{personnel_id}", response_model=PersonnelResponse)
async def get_personnel(
    personnel_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    directory = PersonnelDirectory(db)
    record = await directory.view(actor, personnel_id)
    return (await _to_responses(directory, [record], actor))[0]


@router.patch("/{personnel_id}/assignment", response_model=PersonnelResponse)
async def update_assignment(
    request: Request,
    personnel_id: uuid.UUID,
    data: AssignmentUpdate,
    actor: OptionalActor,
    db: DbSession,
):
    """Change rank and position (moderator/admin) or role (admin)."""
    directory = PersonnelDirectory(db)
    record = await directory.update_assignment(
        actor,
        personnel_id,
        rank=data.rank,
        position=data.position,
        role=data.role,
        ip_address=get_client_ip(request),
    )
    return (await _to_responses(directory, [record], actor))[0]


@router.get("/{personnel_id}/promotion", response_model=PromotionStatusResponse)
async def get_promotion_status(
    personnel_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    """Time in rank and whether a promotion is due."""
    directory = PersonnelDirectory(db)
    record = await directory.view(actor, personnel_id)
    now = directory.clock()
    return PromotionStatusResponse(
        personnel_id=record.id,
        rank=record.rank,
        rank_label=rank_label(record.rank),
        rank_changed_at=record.rank_changed_at,
        days_in_rank=elapsed_days(record.rank_changed_at, now),
        required_days=required_days(record.rank),
        days_until_due=days_until_due(record.rank, record.rank_changed_at, now),
        promotion_due=await directory.promotion_due_flag(record.id, now),
    )


@router.patch("/{personnel_id}/profile", response_model=PersonnelResponse)
async def update_profile(
    request: Request,
    personnel_id: uuid.UUID,
    data: ProfileUpdate,
    actor: OptionalActor,
    db: DbSession,
):
    """Edit your own biography."""
    directory = PersonnelDirectory(db)
    record = await directory.update_profile(
        actor,
        personnel_id,
        bio=data.bio,
        ip_address=get_client_ip(request),
    )
    return (await _to_responses(directory, [record], actor))[0]
