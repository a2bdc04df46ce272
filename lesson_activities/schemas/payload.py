"""
Activity payload schemas.

One model per activity type. Every model can be built from its ORM row
(from_attributes) and knows its own required-field rules via check(),
which the payload editor runs before touching the store.
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from lesson_activities.composition import errors
from lesson_activities.composition.ordering import Direction
from lesson_activities.kernel.models.payloads import ImagePosition, QuestionType

CHOICE_QUESTION_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.MULTIPLE_SELECT)


def coerce_published(value: Any) -> bool:
    """Accept the legacy "Yes"/"No" strings alongside real booleans."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("yes", "true", "1"):
            return True
        if lowered in ("no", "false", "0", ""):
            return False
    raise ValueError(f"published must be a boolean or 'Yes'/'No', got {value!r}")


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


class PayloadBase(BaseModel):
    """Fields shared by single-record payloads."""

    published: bool = False

    class Config:
        from_attributes = True

    @field_validator("published", mode="before")
    @classmethod
    def validate_published(cls, v: Any) -> bool:
        return coerce_published(v)

    def check(self) -> None:
        """Raise errors.ValidationError if a required field is missing."""


class ReadingPayload(PayloadBase):
    title: str = ""
    content: str = ""

    def check(self) -> None:
        if _blank(self.title):
            raise errors.ValidationError("title", "Reading title is required")


class ReadingAddonPayload(PayloadBase):
    content: str = ""


class SubReadingPayload(PayloadBase):
    title: str = ""
    content: str = ""

    def check(self) -> None:
        if _blank(self.title):
            raise errors.ValidationError("title", "Sub-reading title is required")


class SourcePayload(PayloadBase):
    title_ce: str = ""
    title_ad: str = ""
    content: str = ""
    image_url: Optional[str] = None
    image_description: Optional[str] = None
    image_location: Optional[str] = None


class InTextSourcePayload(PayloadBase):
    title_ce: str = ""
    title_ad: str = ""
    intro: str = ""
    content: str = ""


class ImagePayload(PayloadBase):
    image_url: str = ""
    title: str = ""
    description_title: str = ""
    description: str = ""
    alt_text: str = ""
    position: ImagePosition = ImagePosition.CENTER

    def check(self) -> None:
        if _blank(self.image_url):
            raise errors.ValidationError("image_url", "Upload an image before saving")


class GraphicOrganizerPayload(PayloadBase):
    """template_type selects the renderer; content is template-specific JSON."""

    template_type: str = ""
    content: Dict[str, Any] = Field(default_factory=dict)

    def check(self) -> None:
        if _blank(self.template_type):
            raise errors.ValidationError("template_type", "Choose a graphic organizer template")


# Nested payloads

class VocabularyItemPayload(BaseModel):
    id: Optional[uuid.UUID] = None
    word: str = ""
    definition: str = ""
    vocab_order: int = 0

    class Config:
        from_attributes = True


class VocabularyPayload(BaseModel):
    """
    Ordered vocabulary terms. The published flag of a vocabulary activity
    lives on the activity itself.
    """

    items: List[VocabularyItemPayload] = Field(default_factory=list)

    def check(self) -> None:
        if not self.items:
            raise errors.ValidationError("items", "A vocabulary list needs at least one term")


class ChoicePayload(BaseModel):
    id: Optional[uuid.UUID] = None
    choice_text: str = ""
    is_correct: bool = False
    order: int = 0

    class Config:
        from_attributes = True


class QuestionPayload(BaseModel):
    id: Optional[uuid.UUID] = None
    question_order: int = 0
    question_title: str = ""
    question_text: str = ""
    question_type: Optional[QuestionType] = None
    part_b: Optional[str] = None
    published: bool = False
    choices: List[ChoicePayload] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @field_validator("published", mode="before")
    @classmethod
    def validate_published(cls, v: Any) -> bool:
        return coerce_published(v)

    @property
    def is_choice_based(self) -> bool:
        return self.question_type in CHOICE_QUESTION_TYPES

    def check(self, prefix: str = "question") -> None:
        if self.question_type is None:
            raise errors.ValidationError(f"{prefix}.question_type", "Please select a question type")
        if not self.is_choice_based:
            return

        label = self.question_type.value
        if len(self.choices) < 2:
            raise errors.ValidationError(
                f"{prefix}.choices",
                f"{label} questions must have at least 2 answer options",
            )
        correct = sum(1 for c in self.choices if c.is_correct)
        if correct == 0:
            raise errors.ValidationError(
                f"{prefix}.choices",
                f"Select at least one correct answer for the {label} question",
            )
        if self.question_type == QuestionType.MULTIPLE_SELECT and correct < 2:
            raise errors.ValidationError(
                f"{prefix}.choices",
                "Multiple Select questions must have at least 2 correct answers",
            )
        if any(_blank(c.choice_text) for c in self.choices):
            raise errors.ValidationError(f"{prefix}.choices", "All answer options must have text")


class QuizPayload(BaseModel):
    questions: List[QuestionPayload] = Field(default_factory=list)

    def check(self) -> None:
        seen = set()
        for i, question in enumerate(self.questions):
            if question.id is not None:
                if question.id in seen:
                    raise errors.ValidationError(f"questions.{i}.id", "Duplicate question id")
                seen.add(question.id)
            question.check(prefix=f"questions.{i}")


# Request / response envelopes

class PayloadResponse(BaseModel):
    """Payload of one activity, shaped by its activity_type."""

    activity_id: uuid.UUID
    activity_type: str
    payload: Dict[str, Any]


class VocabularyItemCreate(BaseModel):
    word: str = ""
    definition: str = ""


class ChoiceCreate(BaseModel):
    choice_text: str = ""
    is_correct: bool = False


class QuestionTypeChange(BaseModel):
    """Without choices, a switch to a choice-based type seeds blank options."""

    question_type: QuestionType
    choices: Optional[List[ChoicePayload]] = None


class ItemMove(BaseModel):
    """Adjacent move; moving past either end is a no-op."""

    direction: Direction
