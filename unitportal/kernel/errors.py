"""
Error hierarchy for the portal core.

Every service operation either applies fully or raises one of these before
touching state. The API layer maps them to HTTP responses (see
unitportal.api.errors).
"""

from typing import Optional


class PortalError(Exception):
    """Base class for all portal errors."""

    default_code = "portal_error"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class Unauthorized(PortalError):
    """The caller's role or identity lacks the right for this operation."""

    default_code = "unauthorized"

    @property
    def unauthenticated(self) -> bool:
        return self.code == "not_authenticated"


class DuplicateIdentity(PortalError):
    """A personnel record with the same nickname already exists."""

    default_code = "duplicate_identity"


class AlreadyAwarded(PortalError):
    """The recipient already holds this award."""

    default_code = "already_awarded"


class NotAwarded(PortalError):
    """The recipient does not hold this award."""

    default_code = "not_awarded"


class NoPendingRequest(PortalError):
    """There is no pending avatar to decide on."""

    default_code = "no_pending_request"


class NotFound(PortalError):
    """Referenced id has no backing entity."""

    default_code = "not_found"


class InvalidInput(PortalError):
    """A required field is empty or malformed."""

    default_code = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
