"""
Pydantic schemas for API request/response validation.
"""

from lesson_activities.schemas.common import (
    ConflictResponse,
    ErrorResponse,
    HealthResponse,
)
from lesson_activities.schemas.payload import (
    ChoicePayload,
    GraphicOrganizerPayload,
    ImagePayload,
    InTextSourcePayload,
    QuestionPayload,
    QuizPayload,
    ReadingAddonPayload,
    ReadingPayload,
    SourcePayload,
    SubReadingPayload,
    VocabularyItemPayload,
    VocabularyPayload,
    coerce_published,
)

__all__ = [
    # Common
    "ErrorResponse",
    "ConflictResponse",
    "HealthResponse",
    # Payloads
    "ReadingPayload",
    "ReadingAddonPayload",
    "SubReadingPayload",
    "SourcePayload",
    "InTextSourcePayload",
    "ImagePayload",
    "GraphicOrganizerPayload",
    "VocabularyItemPayload",
    "VocabularyPayload",
    "QuestionPayload",
    "ChoicePayload",
    "QuizPayload",
    "coerce_published",
]
