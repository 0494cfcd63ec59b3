"""
Centralized error transformation for API routes.

Maps portal errors raised by the services to HTTP responses.
"""

from typing import Any, Dict, Type

from fastapi import HTTPException, status

from unitportal.kernel.errors import (
    AlreadyAwarded,
    DuplicateIdentity,
    InvalidInput,
    NoPendingRequest,
    NotAwarded,
    NotFound,
    PortalError,
    Unauthorized,
)

ERROR_STATUS_MAP: Dict[Type[PortalError], int] = {
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidInput: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DuplicateIdentity: status.HTTP_409_CONFLICT,
    AlreadyAwarded: status.HTTP_409_CONFLICT,
    NotAwarded: status.HTTP_409_CONFLICT,
    NoPendingRequest: status.HTTP_409_CONFLICT,
}


def map_portal_error(error: PortalError) -> HTTPException:
    """
    Map a portal error to an HTTPException.

    Body shape: {"detail": {"code": ..., "message": ..., "field": ...}}
    """
    detail: Dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InvalidInput) and error.field is not None:
        detail["field"] = error.field

    # A guest hitting a members-only operation is 401, not 403
    if isinstance(error, Unauthorized) and error.unauthenticated:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    status_code = ERROR_STATUS_MAP.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=detail)
