"""
Activity Type Registry.

Static table from the activity type discriminant to everything needed to
route a payload: the collection it lives in, its pydantic model, whether it
owns a nested ordered sub-collection, and its load/save/delete/preview
functions. Adding a type is one entry here plus one IO implementation.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel

from lesson_activities.composition.errors import UnknownActivityType
from lesson_activities.composition.payload_io import QuizIO, SingleRecordIO, VocabularyIO
from lesson_activities.config import get_settings
from lesson_activities.kernel.models import Activity, ActivityType
from lesson_activities.kernel.store import RecordStore
from lesson_activities.schemas.payload import (
    GraphicOrganizerPayload,
    ImagePayload,
    InTextSourcePayload,
    QuizPayload,
    ReadingAddonPayload,
    ReadingPayload,
    SourcePayload,
    SubReadingPayload,
    VocabularyItemPayload,
    VocabularyPayload,
)

Loader = Callable[[RecordStore, Activity], Awaitable[Optional[BaseModel]]]
Saver = Callable[[RecordStore, Activity, Any], Awaitable[None]]
Deleter = Callable[[RecordStore, Activity], Awaitable[None]]
ShellFactory = Callable[[RecordStore, Activity], Awaitable[None]]
Preview = Callable[[Any, int], str]


@dataclass(frozen=True)
class ActivityTypeSpec:
    activity_type: ActivityType
    collection: str
    payload_model: Type[BaseModel]
    loader: Loader
    saver: Saver
    deleter: Deleter
    preview: Preview
    has_nested_order: bool = False
    default_factory: Optional[Callable[[], BaseModel]] = None
    create_shell: Optional[ShellFactory] = None

    def default_payload(self) -> BaseModel:
        factory = self.default_factory or self.payload_model
        return factory()


# Previews

def _truncate(text: str, max_chars: int) -> str:
    return text[:max_chars] + "..." if len(text) > max_chars else text


def _title_preview(attr: str, fallback: str) -> Preview:
    def preview(payload: Any, max_chars: int) -> str:
        return getattr(payload, attr, "") or fallback
    return preview


def _addon_preview(payload: ReadingAddonPayload, max_chars: int) -> str:
    return _truncate(payload.content, max_chars) if payload.content else "Reading Addon"


def _vocabulary_preview(payload: VocabularyPayload, max_chars: int) -> str:
    count = len(payload.items)
    if count == 0:
        return "Vocabulary (empty)"
    return f"Vocabulary ({count} {'term' if count == 1 else 'terms'})"


def _quiz_preview(payload: QuizPayload, max_chars: int) -> str:
    if not payload.questions:
        return "Untitled Question"
    first = payload.questions[0]
    if first.question_title:
        return first.question_title
    return _truncate(first.question_text, max_chars) if first.question_text else "Untitled Question"


def _single(
    activity_type: ActivityType,
    collection: str,
    payload_model: Type[BaseModel],
    preview: Preview,
) -> ActivityTypeSpec:
    io = SingleRecordIO(collection, payload_model)
    return ActivityTypeSpec(
        activity_type=activity_type,
        collection=collection,
        payload_model=payload_model,
        loader=io.load,
        saver=io.save,
        deleter=io.delete,
        preview=preview,
        create_shell=io.create_shell,
    )


_vocabulary_io = VocabularyIO()
_quiz_io = QuizIO()

REGISTRY: Dict[ActivityType, ActivityTypeSpec] = {
    ActivityType.READING: _single(
        ActivityType.READING, "readings", ReadingPayload,
        _title_preview("title", "Untitled Reading"),
    ),
    ActivityType.READING_ADDON: _single(
        ActivityType.READING_ADDON, "reading_addons", ReadingAddonPayload,
        _addon_preview,
    ),
    ActivityType.SUB_READING: _single(
        ActivityType.SUB_READING, "sub_readings", SubReadingPayload,
        _title_preview("title", "Untitled Sub-Reading"),
    ),
    ActivityType.SOURCE: _single(
        ActivityType.SOURCE, "sources", SourcePayload,
        _title_preview("title_ce", "Untitled Source"),
    ),
    ActivityType.IN_TEXT_SOURCE: _single(
        ActivityType.IN_TEXT_SOURCE, "in_text_sources", InTextSourcePayload,
        _title_preview("title_ce", "Untitled In-Text Source"),
    ),
    ActivityType.IMAGE: _single(
        ActivityType.IMAGE, "images", ImagePayload,
        _title_preview("title", "Untitled Image"),
    ),
    ActivityType.GRAPHIC_ORGANIZER: _single(
        ActivityType.GRAPHIC_ORGANIZER, "graphic_organizers", GraphicOrganizerPayload,
        _title_preview("template_type", "Untitled Organizer"),
    ),
    ActivityType.VOCABULARY: ActivityTypeSpec(
        activity_type=ActivityType.VOCABULARY,
        collection=VocabularyIO.collection,
        payload_model=VocabularyPayload,
        loader=_vocabulary_io.load,
        saver=_vocabulary_io.save,
        deleter=_vocabulary_io.delete,
        preview=_vocabulary_preview,
        has_nested_order=True,
        # The editor always starts with one blank term
        default_factory=lambda: VocabularyPayload(items=[VocabularyItemPayload()]),
    ),
    ActivityType.QUESTION: ActivityTypeSpec(
        activity_type=ActivityType.QUESTION,
        collection=QuizIO.questions,
        payload_model=QuizPayload,
        loader=_quiz_io.load,
        saver=_quiz_io.save,
        deleter=_quiz_io.delete,
        preview=_quiz_preview,
        has_nested_order=True,
    ),
}

NO_CONTENT_PREVIEW = "No content yet"


def resolve_type(activity_type: Union[str, ActivityType]) -> ActivityType:
    try:
        return ActivityType(activity_type)
    except ValueError:
        raise UnknownActivityType(activity_type) from None


def get_spec(activity_type: Union[str, ActivityType]) -> ActivityTypeSpec:
    """Registry entry for a discriminant; UnknownActivityType if none."""
    resolved = resolve_type(activity_type)
    try:
        return REGISTRY[resolved]
    except KeyError:
        raise UnknownActivityType(activity_type) from None


def registered_types() -> List[ActivityType]:
    return list(REGISTRY)


def preview_for(activity_type: Union[str, ActivityType], payload: Optional[BaseModel]) -> str:
    """Short list label for a loaded payload; payload is None when nothing is stored."""
    if payload is None:
        return NO_CONTENT_PREVIEW
    return get_spec(activity_type).preview(payload, get_settings().preview_max_chars)
