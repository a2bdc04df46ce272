"""
Type-specific activity payload tables.

Single-record payloads hold a unique activity_id; vocabulary items and quiz
questions hang several rows off one activity, each with its own order field.
All of them cascade with the owning activity.
"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    String,
    Text,
    Index,
    JSON,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from lesson_activities.kernel.models.base import Base, TimestampMixin, generate_uuid


class ImagePosition(str, Enum):
    """Horizontal placement of an image activity."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class QuestionType(str, Enum):
    """Quiz question kinds offered by the question editor."""
    OPEN_ENDED = "Open Ended"
    CHECK_FOR_UNDERSTANDING = "Check for Understanding"
    SUPPORTING_QUESTION = "Supporting Question"
    MULTIPLE_CHOICE = "Multiple Choice"
    MULTIPLE_SELECT = "Multiple Select"
    PART_A_PART_B = "Part A Part B Question"


def _activity_fk(unique: bool = True) -> Mapped[uuid.UUID]:
    return mapped_column(
        Uuid(),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        unique=unique,
        index=not unique,
    )


class Reading(Base, TimestampMixin):
    """Reading passage."""

    __tablename__ = "readings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    title: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ReadingAddon(Base, TimestampMixin):
    """Short text attached after a reading. Has no title."""

    __tablename__ = "reading_addons"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class SubReading(Base, TimestampMixin):
    """Secondary reading passage."""

    __tablename__ = "sub_readings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    title: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Source(Base, TimestampMixin):
    """Primary source document with two title variants (CE and AD)."""

    __tablename__ = "sources"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    title_ce: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    title_ad: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_location: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class InTextSource(Base, TimestampMixin):
    """Source excerpt embedded inside a reading."""

    __tablename__ = "in_text_sources"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    title_ce: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    title_ad: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    intro: Mapped[str] = mapped_column(Text, default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Image(Base, TimestampMixin):
    """Image with caption. image_url comes from the storage service."""

    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    image_url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    title: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    description_title: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    alt_text: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    position: Mapped[ImagePosition] = mapped_column(
        String(10),
        default=ImagePosition.CENTER.value,
        nullable=False,
    )
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class VocabularyItem(Base, TimestampMixin):
    """One term of a vocabulary activity."""

    __tablename__ = "vocabulary_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk(unique=False)
    word: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    definition: Mapped[str] = mapped_column(Text, default="", nullable=False)
    vocab_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index("ix_vocabulary_items_activity_order", "activity_id", "vocab_order"),
    )


class Question(Base, TimestampMixin):
    """One question of a quiz activity."""

    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk(unique=False)
    question_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    question_title: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    question_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    question_type: Mapped[Optional[QuestionType]] = mapped_column(String(50), nullable=True)
    # Only meaningful for Part A / Part B questions
    part_b: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_questions_activity_order", "activity_id", "question_order"),
    )


class QuestionChoice(Base):
    """Answer choice of a choice-based question."""

    __tablename__ = "question_choices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    choice_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class GraphicOrganizer(Base, TimestampMixin):
    """
    Graphic organizer. content is template-dependent JSON; the Table template
    stores headers, rows, headerCells and answerCells.
    """

    __tablename__ = "graphic_organizers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(), primary_key=True, default=generate_uuid)
    activity_id: Mapped[uuid.UUID] = _activity_fk()
    template_type: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    content: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
