"""
Nested order managers for vocabulary terms and quiz questions / choices.

Both follow one pattern (OrderedItems): an in-memory list that supports
add, remove (refused below a minimum size) and adjacent up/down moves, with
the order field of every item rewritten to its index after each change.
Quiz choices are managed per question, so reordering one question's
choices never touches another question.

VocabularyEditor and QuizEditor wrap a manager around the payload editor:
load, apply one operation, save.
"""

from typing import Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.composition import errors
from lesson_activities.composition.ordering import Direction, swap_adjacent
from lesson_activities.composition.payload_editor import PayloadEditor
from lesson_activities.kernel.models import Activity, ActivityType, QuestionType
from lesson_activities.schemas.payload import (
    ChoicePayload,
    QuestionPayload,
    QuizPayload,
    VocabularyItemPayload,
    VocabularyPayload,
)

T = TypeVar("T", bound=BaseModel)

# Blank options seeded when a question becomes choice-based
SEEDED_CHOICES = {
    QuestionType.MULTIPLE_CHOICE: 4,
    QuestionType.MULTIPLE_SELECT: 5,
}
MIN_CHOICES = 2


def seeded_choices(question_type: Optional[QuestionType]) -> List[ChoicePayload]:
    return [ChoicePayload() for _ in range(SEEDED_CHOICES.get(question_type, 0))]


def new_question(question_type: Optional[QuestionType] = None) -> QuestionPayload:
    """A blank question; choice-based types come with blank options."""
    return QuestionPayload(question_type=question_type, choices=seeded_choices(question_type))


class OrderedItems(Generic[T]):
    """Ordered list of payload items kept at order_field == index."""

    def __init__(
        self,
        items: List[T],
        order_field: str,
        factory: Callable[[], T],
        minimum: int = 0,
    ):
        self.order_field = order_field
        self.factory = factory
        self.minimum = minimum
        self._items = sorted(items, key=lambda item: getattr(item, order_field))
        self.renumber()

    @property
    def items(self) -> List[T]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def renumber(self) -> None:
        for position, item in enumerate(self._items):
            setattr(item, self.order_field, position)

    def add_item(self, item: Optional[T] = None) -> int:
        """Append an item (a blank one by default); returns its index."""
        self._items.append(item if item is not None else self.factory())
        self.renumber()
        return len(self._items) - 1

    def remove_item(self, index: int) -> T:
        if not 0 <= index < len(self._items):
            raise errors.OrderingError(f"No item at index {index}")
        if len(self._items) - 1 < self.minimum:
            raise errors.OrderingError(f"At least {self.minimum} item(s) required")
        removed = self._items.pop(index)
        self.renumber()
        return removed

    def move_item(self, index: int, direction: Direction) -> bool:
        """Swap with the neighbour above or below. Returns False at the edges."""
        reordered = swap_adjacent(self._items, index, direction)
        moved = any(a is not b for a, b in zip(reordered, self._items))
        # In place: questions hold a reference to their choice list
        self._items[:] = reordered
        self.renumber()
        return moved


class VocabularyOrderManager(OrderedItems[VocabularyItemPayload]):
    """Vocabulary terms; the list never drops below one term."""

    def __init__(self, payload: VocabularyPayload):
        super().__init__(
            list(payload.items),
            order_field="vocab_order",
            factory=VocabularyItemPayload,
            minimum=1,
        )
        if not self._items:
            self.add_item()

    def to_payload(self) -> VocabularyPayload:
        return VocabularyPayload(items=list(self._items))


class QuizOrderManager:
    """Questions of a quiz and, independently, the choices of each question."""

    def __init__(self, payload: QuizPayload):
        self.questions: OrderedItems[QuestionPayload] = OrderedItems(
            list(payload.questions),
            order_field="question_order",
            factory=QuestionPayload,
        )
        for question in self.questions.items:
            self._choice_list(question)

    def question(self, index: int) -> QuestionPayload:
        if not 0 <= index < len(self.questions):
            raise errors.OrderingError(f"No question at index {index}")
        return self.questions.items[index]

    def _choice_list(self, question: QuestionPayload) -> OrderedItems[ChoicePayload]:
        choices = OrderedItems(
            question.choices,
            order_field="order",
            factory=ChoicePayload,
            minimum=MIN_CHOICES if question.is_choice_based else 0,
        )
        question.choices = choices.items
        return choices

    def choices(self, question_index: int) -> OrderedItems[ChoicePayload]:
        return self._choice_list(self.question(question_index))

    # Questions

    def add_question(
        self,
        question_type: Optional[QuestionType] = None,
        question: Optional[QuestionPayload] = None,
    ) -> int:
        if question is None:
            question = new_question(question_type)
        index = self.questions.add_item(question)
        self._choice_list(question)
        return index

    def remove_question(self, index: int) -> QuestionPayload:
        return self.questions.remove_item(index)

    def move_question(self, index: int, direction: Direction) -> bool:
        return self.questions.move_item(index, direction)

    def set_question_type(
        self,
        index: int,
        question_type: QuestionType,
        choices: Optional[List[ChoicePayload]] = None,
    ) -> None:
        """
        Change a question's type. Switching to a choice-based type starts
        over with the given options, or fresh blank ones; other types keep
        what they have unless options are given.
        """
        question = self.question(index)
        question.question_type = question_type
        if choices is not None:
            question.choices = list(choices)
        elif question_type in SEEDED_CHOICES:
            question.choices = seeded_choices(question_type)
        self._choice_list(question)

    # Choices

    def add_choice(self, question_index: int, choice: Optional[ChoicePayload] = None) -> int:
        return self.choices(question_index).add_item(choice)

    def remove_choice(self, question_index: int, index: int) -> ChoicePayload:
        return self.choices(question_index).remove_item(index)

    def move_choice(self, question_index: int, index: int, direction: Direction) -> bool:
        return self.choices(question_index).move_item(index, direction)

    def mark_correct(self, question_index: int, index: int) -> None:
        """
        Multiple Select toggles the choice; every other type makes it the
        single correct choice.
        """
        question = self.question(question_index)
        if not 0 <= index < len(question.choices):
            raise errors.OrderingError(f"No choice at index {index}")
        if question.question_type == QuestionType.MULTIPLE_SELECT:
            question.choices[index].is_correct = not question.choices[index].is_correct
        else:
            for position, choice in enumerate(question.choices):
                choice.is_correct = position == index

    def to_payload(self) -> QuizPayload:
        return QuizPayload(questions=list(self.questions.items))


class _NestedEditor:
    activity_type: ActivityType

    def __init__(self, session: AsyncSession, ip_address: Optional[str] = None):
        self.payloads = PayloadEditor(session, ip_address=ip_address)

    def _require_type(self, activity: Activity) -> None:
        if ActivityType(activity.activity_type) != self.activity_type:
            raise errors.OrderingError(
                f"Activity {activity.id} is a {activity.activity_type} activity, "
                f"not {self.activity_type.value}"
            )


class VocabularyEditor(_NestedEditor):
    """Single vocabulary operations persisted immediately."""

    activity_type = ActivityType.VOCABULARY

    async def _manager(self, activity: Activity) -> VocabularyOrderManager:
        self._require_type(activity)
        payload = await self.payloads.load(activity)
        return VocabularyOrderManager(payload)  # type: ignore[arg-type]

    async def add_item(
        self,
        activity: Activity,
        word: str = "",
        definition: str = "",
    ) -> VocabularyPayload:
        manager = await self._manager(activity)
        manager.add_item(VocabularyItemPayload(word=word, definition=definition))
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]

    async def remove_item(self, activity: Activity, index: int) -> VocabularyPayload:
        manager = await self._manager(activity)
        manager.remove_item(index)
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]

    async def move_item(self, activity: Activity, index: int, direction: Direction) -> VocabularyPayload:
        manager = await self._manager(activity)
        if not manager.move_item(index, direction):
            return manager.to_payload()
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]


class QuizEditor(_NestedEditor):
    """
    Single quiz operations persisted immediately.

    Every operation goes through the validated save, so a structural edit
    that would leave a question incomplete (for example a choice-based
    question with blank options) is refused and nothing is stored.
    """

    activity_type = ActivityType.QUESTION

    async def _manager(self, activity: Activity) -> QuizOrderManager:
        self._require_type(activity)
        payload = await self.payloads.load(activity)
        return QuizOrderManager(payload)  # type: ignore[arg-type]

    async def _save(self, activity: Activity, manager: QuizOrderManager) -> QuizPayload:
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]

    async def add_question(self, activity: Activity, question: QuestionPayload) -> QuizPayload:
        """Append a question. It is always stored as a new row."""
        manager = await self._manager(activity)
        fresh = question.model_copy(update={
            "id": None,
            "choices": [c.model_copy(update={"id": None}) for c in question.choices],
        })
        manager.add_question(question=fresh)
        return await self._save(activity, manager)

    async def remove_question(self, activity: Activity, index: int) -> QuizPayload:
        manager = await self._manager(activity)
        manager.remove_question(index)
        return await self._save(activity, manager)

    async def set_question_type(
        self,
        activity: Activity,
        index: int,
        question_type: QuestionType,
        choices: Optional[List[ChoicePayload]] = None,
    ) -> QuizPayload:
        manager = await self._manager(activity)
        manager.set_question_type(index, question_type, choices)
        return await self._save(activity, manager)

    async def add_choice(
        self,
        activity: Activity,
        question_index: int,
        choice_text: str = "",
        is_correct: bool = False,
    ) -> QuizPayload:
        manager = await self._manager(activity)
        index = manager.add_choice(question_index, ChoicePayload(choice_text=choice_text))
        if is_correct:
            manager.mark_correct(question_index, index)
        return await self._save(activity, manager)

    async def remove_choice(self, activity: Activity, question_index: int, index: int) -> QuizPayload:
        manager = await self._manager(activity)
        manager.remove_choice(question_index, index)
        return await self._save(activity, manager)

    async def mark_correct(self, activity: Activity, question_index: int, index: int) -> QuizPayload:
        manager = await self._manager(activity)
        manager.mark_correct(question_index, index)
        return await self._save(activity, manager)

    async def move_question(self, activity: Activity, index: int, direction: Direction) -> QuizPayload:
        manager = await self._manager(activity)
        if not manager.move_question(index, direction):
            return manager.to_payload()
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]

    async def move_choice(
        self,
        activity: Activity,
        question_index: int,
        index: int,
        direction: Direction,
    ) -> QuizPayload:
        manager = await self._manager(activity)
        if not manager.move_choice(question_index, index, direction):
            return manager.to_payload()
        return await self.payloads.save(activity, manager.to_payload())  # type: ignore[return-value]
