"""
Authentication endpoints.
"""

from fastapi import APIRouter, HTTPException, Request, status

from unitportal.api.deps import DbSession, CurrentActor, OptionalActor, get_client_ip
from unitportal.schemas.auth import LoginRequest, TokenResponse, CapabilitiesResponse
from unitportal.schemas.personnel import PersonnelResponse
from unitportal.kernel.identity.identity_service import PersonnelDirectory
from unitportal.kernel.identity.jwt import get_jwt_manager
from unitportal.kernel.models.personnel import Role
from unitportal.kernel.permissions.permission_service import capabilities_of

router = APIRouter()


async def _member_response(directory: PersonnelDirectory, member) -> PersonnelResponse:
    return PersonnelResponse.from_record(
        member,
        awards=await directory.awards_held(member.id),
        promotion_due=directory.is_promotion_due(member),
        show_access_code=Role(member.role) == Role.ADMIN,
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
):
    """
    Sign in with an access code.

    Returns a bearer token and the member's record.
    """
    directory = PersonnelDirectory(db)
    member = await directory.authenticate(
        access_code=data.access_code,
        ip_address=get_client_ip(request),
    )

    if member is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "invalid_access_code", "message": "Unknown access code"},
        )

    token = get_jwt_manager().issue(member.id, member.nickname, Role(member.role).value)
    return TokenResponse(
        access_token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
        member=await _member_response(directory, member),
    )


@router.get("/me", response_model=PersonnelResponse)
async def get_current_member(actor: CurrentActor, db: DbSession):
    """Get the signed-in member's record."""
    return await _member_response(PersonnelDirectory(db), actor)


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def get_capabilities(actor: OptionalActor):
    """What the caller may see and change; guests get the guest set."""
    return CapabilitiesResponse.from_capabilities(capabilities_of(actor))
