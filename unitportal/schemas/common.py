"""
Common schema types used across the API.
"""

from typing import Any, Optional
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Body of a portal error."""

    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: ErrorDetail


class SuccessResponse(BaseModel):
    """Standard success response."""

    message: str
    data: Optional[Any] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
    personnel: int = 0
