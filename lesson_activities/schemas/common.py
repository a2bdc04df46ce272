"""
Common schema types used across the API.
"""

from typing import List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    field: Optional[str] = None
    request_id: Optional[str] = None


class ConflictResponse(ErrorResponse):
    """409 body when a referenced activity is deleted without a policy."""

    direction_ids: List[str] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
