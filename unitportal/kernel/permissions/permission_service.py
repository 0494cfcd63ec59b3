"""
Role authorization model.

Single place that answers "may this caller do X". Every mutating service
operation calls one of the require_* guards before it reads or writes
anything, so a role change takes effect on the caller's very next action.

The caller is an Optional[Personnel]: None is the unauthenticated guest.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from unitportal.kernel.errors import Unauthorized
from unitportal.kernel.models.personnel import Personnel, Role


class Page(str, Enum):
    """Portal pages."""
    NEWS = "news"
    INFO = "info"
    DIVISIONS = "divisions"
    AWARDS = "awards"
    CHARTER = "charter"
    PERSONNEL = "personnel"


ALL_ROLES: FrozenSet[Role] = frozenset(Role)
EDITOR_ROLES: FrozenSet[Role] = frozenset({Role.MODERATOR, Role.ADMIN})
ADMIN_ROLES: FrozenSet[Role] = frozenset({Role.ADMIN})

PAGE_ROLES: Dict[Page, FrozenSet[Role]] = {
    Page.NEWS: ALL_ROLES,
    Page.INFO: ALL_ROLES,
    Page.DIVISIONS: ALL_ROLES,
    Page.AWARDS: ALL_ROLES,
    Page.CHARTER: ALL_ROLES,
    Page.PERSONNEL: EDITOR_ROLES,
}


@dataclass(frozen=True)
class Capabilities:
    """What a role may see and change."""

    role: Role
    can_edit_content: bool
    is_admin: bool
    can_act: bool
    visible_pages: Tuple[Page, ...]

    def can_view_page(self, page: Page) -> bool:
        return page in self.visible_pages


def role_of(actor: Optional[Personnel]) -> Role:
    """Resolve the caller's current role; no actor means guest."""
    if actor is None:
        return Role.GUEST
    return Role(actor.role)


def capabilities_for(role: Role) -> Capabilities:
    """
    Map a role to its capabilities.

    Read access nests (admin > moderator > user > guest); write rights are
    listed per operation rather than derived from that order.
    """
    role = Role(role)
    return Capabilities(
        role=role,
        can_edit_content=role in EDITOR_ROLES,
        is_admin=role in ADMIN_ROLES,
        can_act=role != Role.GUEST,
        visible_pages=tuple(page for page, roles in PAGE_ROLES.items() if role in roles),
    )


def capabilities_of(actor: Optional[Personnel]) -> Capabilities:
    return capabilities_for(role_of(actor))


def _deny(actor: Optional[Personnel], message: str) -> Unauthorized:
    if actor is None:
        return Unauthorized("Sign in with your access code first", code="not_authenticated")
    return Unauthorized(message)


def require_member(actor: Optional[Personnel]) -> Personnel:
    """Require an authenticated, non-guest caller."""
    if actor is None or not capabilities_of(actor).can_act:
        raise _deny(actor, "Members only")
    return actor


def require_content_editor(actor: Optional[Personnel]) -> Personnel:
    """Require a moderator or admin."""
    if actor is None or not capabilities_of(actor).can_edit_content:
        raise _deny(actor, "Moderator or admin access required")
    return actor


def require_admin(actor: Optional[Personnel]) -> Personnel:
    """Require an admin."""
    if actor is None or not capabilities_of(actor).is_admin:
        raise _deny(actor, "Admin access required")
    return actor


def require_page(actor: Optional[Personnel], page: Page) -> Optional[Personnel]:
    """Require that the caller's role can see a page."""
    if not capabilities_of(actor).can_view_page(page):
        raise _deny(actor, f"The {page.value} page is not available to your role")
    return actor


def require_self(actor: Optional[Personnel], personnel: Personnel) -> Personnel:
    """Require a member acting on their own record."""
    member = require_member(actor)
    if member.id != personnel.id:
        raise Unauthorized("You can only change your own profile")
    return member
