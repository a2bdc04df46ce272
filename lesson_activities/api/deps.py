"""
FastAPI dependencies for database sessions and request metadata.

Authentication is handled in front of this service; routes here trust the
caller.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.database import get_db


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


ClientIp = Annotated[Optional[str], Depends(get_client_ip)]
