"""
Activity model - one ordered slot in a lesson's content sequence.

Each activity carries a type discriminant; its content lives in exactly one
type-specific payload table keyed by activity_id (see payloads.py).
"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Integer, String, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lesson_activities.kernel.models.base import Base, TimestampMixin, generate_uuid


class ActivityType(str, Enum):
    """Activity payload discriminants."""
    READING = "reading"
    READING_ADDON = "reading_addon"
    SUB_READING = "sub_reading"
    SOURCE = "source"
    IN_TEXT_SOURCE = "in_text_source"
    IMAGE = "image"
    VOCABULARY = "vocabulary"
    QUESTION = "question"
    GRAPHIC_ORGANIZER = "graphic_organizer"


class Activity(Base, TimestampMixin):
    """
    Addressable unit in a lesson's activity sequence.

    Within a lesson, order values form the contiguous range 0..n-1 after
    every insert, move and delete.
    """

    __tablename__ = "activities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    # Lessons belong to the curriculum service; no FK
    lesson_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )
    activity_type: Mapped[ActivityType] = mapped_column(
        String(50),
        nullable=False,
    )
    order: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    published: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_activities_lesson_order", "lesson_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<Activity {self.activity_type} {self.id} #{self.order}>"
