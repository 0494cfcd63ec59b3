"""
Content section endpoints (divisions, information items, charter chapters).
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from unitportal.api.deps import DbSession, OptionalActor, get_client_ip
from unitportal.engines.content.section_service import SectionService
from unitportal.kernel.models.content import SectionKind
from unitportal.schemas.common import SuccessResponse
from unitportal.schemas.content import SectionCreate, SectionResponse, SectionUpdate

router = APIRouter()


@router.get("/{kind}", response_model=List[SectionResponse])
async def list_sections(kind: SectionKind, db: DbSession):
    sections = await SectionService(db).list_sections(kind)
    return [SectionResponse.model_validate(s) for s in sections]


@router.post("/{kind}", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def create_section(
    request: Request,
    kind: SectionKind,
    data: SectionCreate,
    actor: OptionalActor,
    db: DbSession,
):
    section = await SectionService(db).create_section(
        actor,
        kind,
        title=data.title,
        body=data.body,
        icon=data.icon,
        link=data.link,
        ip_address=get_client_ip(request),
    )
    return SectionResponse.model_validate(section)


@router.patch("/{kind}/{section_id}", response_model=SectionResponse)
async def update_section(
    request: Request,
    kind: SectionKind,
    section_id: uuid.UUID,
    data: SectionUpdate,
    actor: OptionalActor,
    db: DbSession,
):
    section = await SectionService(db).update_section(
        actor,
        section_id,
        title=data.title,
        body=data.body,
        icon=data.icon,
        link=data.link,
        kind=kind,
        ip_address=get_client_ip(request),
    )
    return SectionResponse.model_validate(section)


@router.delete("/{kind}/{section_id}", response_model=SuccessResponse)
async def delete_section(
    request: Request,
    kind: SectionKind,
    section_id: uuid.UUID,
    actor: OptionalActor,
    db: DbSession,
):
    await SectionService(db).delete_section(
        actor, section_id, kind=kind, ip_address=get_client_ip(request)
    )
    return SuccessResponse(message="Section deleted")
