"""
Permission Core - role-based capabilities.
"""

from unitportal.kernel.permissions.permission_service import (
    Capabilities,
    Page,
    capabilities_for,
    capabilities_of,
    require_admin,
    require_content_editor,
    require_member,
    require_page,
    require_self,
    role_of,
)

__all__ = [
    "Capabilities",
    "Page",
    "capabilities_for",
    "capabilities_of",
    "require_admin",
    "require_content_editor",
    "require_member",
    "require_page",
    "require_self",
    "role_of",
]
