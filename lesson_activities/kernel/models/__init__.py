"""
Kernel Data Models

SQLAlchemy models for lesson activities, their typed payloads, lesson plan
directions and the audit log.
"""

from lesson_activities.kernel.models.base import Base, TimestampMixin, generate_uuid
from lesson_activities.kernel.models.activity import Activity, ActivityType
from lesson_activities.kernel.models.payloads import (
    GraphicOrganizer,
    Image,
    ImagePosition,
    InTextSource,
    Question,
    QuestionChoice,
    QuestionType,
    Reading,
    ReadingAddon,
    Source,
    SubReading,
    VocabularyItem,
)
from lesson_activities.kernel.models.lesson_plan import LessonPlanDirection
from lesson_activities.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # Activities
    "Activity",
    "ActivityType",
    # Payloads
    "Reading",
    "ReadingAddon",
    "SubReading",
    "Source",
    "InTextSource",
    "Image",
    "ImagePosition",
    "VocabularyItem",
    "Question",
    "QuestionChoice",
    "QuestionType",
    "GraphicOrganizer",
    # Lesson plans
    "LessonPlanDirection",
    # Event Log
    "EventLog",
    "EventType",
]
