"""
Lesson plan directions.

Directions belong to the lesson-plan editor; this service only reads them,
clears their activity reference, or deletes them when an activity goes away.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lesson_activities.kernel.models.base import Base, TimestampMixin, generate_uuid


class LessonPlanDirection(Base, TimestampMixin):
    """Teacher-facing instruction that may point at one activity."""

    __tablename__ = "lesson_plan_directions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    lesson_plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )
    activity_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        ForeignKey("activities.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    direction_order: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<LessonPlanDirection {self.id} -> {self.activity_id}>"
