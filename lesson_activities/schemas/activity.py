"""
Activity list schemas.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from lesson_activities.kernel.models import ActivityType
from lesson_activities.orchestration.reference_guard import DeletePolicy
from lesson_activities.schemas.payload import coerce_published


class ActivityCreate(BaseModel):
    """Activity creation request. The activity is appended to the lesson."""

    activity_type: ActivityType
    name: Optional[str] = Field(None, max_length=255)
    published: bool = False

    @field_validator("published", mode="before")
    @classmethod
    def validate_published(cls, v: Any) -> bool:
        return coerce_published(v)


class ActivityUpdate(BaseModel):
    """Rename or (un)publish. Omitted fields are left alone."""

    name: Optional[str] = Field(None, max_length=255)
    published: Optional[bool] = None

    @field_validator("published", mode="before")
    @classmethod
    def validate_published(cls, v: Any) -> Optional[bool]:
        return None if v is None else coerce_published(v)


class ActivityMove(BaseModel):
    """Target position; clamped to the lesson's bounds."""

    new_index: int


class ActivityResponse(BaseModel):
    """Activity response."""

    id: uuid.UUID
    lesson_id: uuid.UUID
    activity_type: str
    order: int
    name: Optional[str]
    published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ActivityListItem(ActivityResponse):
    preview: str


class ActivityListResponse(BaseModel):
    lesson_id: uuid.UUID
    activities: List[ActivityListItem]
    total: int


class ReferenceCheckResponse(BaseModel):
    activity_id: uuid.UUID
    has_references: bool
    direction_ids: List[uuid.UUID]


class DeletionResponse(BaseModel):
    activity_id: uuid.UUID
    deleted: bool
    policy: Optional[DeletePolicy] = None
    directions_decoupled: int = 0
    directions_deleted: int = 0
    remaining: List[ActivityResponse] = []
