"""
Load / save / delete implementations for activity payloads.

The registry wires one of these per activity type:
- SingleRecordIO: one row keyed by activity_id, saved as an upsert
- VocabularyIO: vocabulary_items, delete-all-then-insert on save
- QuizIO: questions upserted by id, their choices delete-then-insert

Loaders return None when nothing has been stored yet.
"""

import uuid
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from lesson_activities.kernel.models import Activity
from lesson_activities.kernel.store import RecordStore
from lesson_activities.logging_config import get_logger
from lesson_activities.schemas.payload import (
    ChoicePayload,
    QuestionPayload,
    QuizPayload,
    VocabularyItemPayload,
    VocabularyPayload,
)

logger = get_logger(__name__)


class SingleRecordIO:
    """Payload stored as exactly one row joined by activity_id."""

    def __init__(self, collection: str, payload_model: Type[BaseModel]):
        self.collection = collection
        self.payload_model = payload_model

    async def load(self, store: RecordStore, activity: Activity) -> Optional[BaseModel]:
        row = await store.select_one(self.collection, {"activity_id": activity.id})
        if row is None:
            return None
        return self.payload_model.model_validate(row)

    async def save(self, store: RecordStore, activity: Activity, payload: BaseModel) -> None:
        # No native upsert on activity_id: select first, then insert or update
        values = payload.model_dump(mode="json")
        existing = await store.select_one(self.collection, {"activity_id": activity.id})
        if existing is None:
            await store.insert(self.collection, {"activity_id": activity.id, **values})
        else:
            await store.update_where(self.collection, {"activity_id": activity.id}, values)

    async def delete(self, store: RecordStore, activity: Activity) -> None:
        await store.delete_where(self.collection, {"activity_id": activity.id})

    async def create_shell(self, store: RecordStore, activity: Activity) -> None:
        """Empty row created together with the activity, filled on first save."""
        await store.insert(self.collection, {"activity_id": activity.id})


class VocabularyIO:
    collection = "vocabulary_items"

    async def load(self, store: RecordStore, activity: Activity) -> Optional[VocabularyPayload]:
        rows = await store.select_where(
            self.collection,
            {"activity_id": activity.id},
            order_by=["vocab_order", "created_at"],
        )
        if not rows:
            return None
        return VocabularyPayload(items=[VocabularyItemPayload.model_validate(r) for r in rows])

    async def save(self, store: RecordStore, activity: Activity, payload: VocabularyPayload) -> None:
        await store.delete_where(self.collection, {"activity_id": activity.id})
        for position, item in enumerate(payload.items):
            await store.insert(
                self.collection,
                {
                    "activity_id": activity.id,
                    "word": item.word,
                    "definition": item.definition,
                    "vocab_order": position,
                },
            )
        logger.debug(
            "Vocabulary rewritten",
            extra={"activity_id": str(activity.id), "items": len(payload.items)},
        )

    async def delete(self, store: RecordStore, activity: Activity) -> None:
        await store.delete_where(self.collection, {"activity_id": activity.id})


class QuizIO:
    """
    Questions keep their ids across saves; choices are rewritten per question.

    Question and choice order fields are reassigned from list position on
    every save, each question's choices independently.
    """

    questions = "questions"
    choices = "question_choices"

    async def load(self, store: RecordStore, activity: Activity) -> Optional[QuizPayload]:
        rows = await store.select_where(
            self.questions,
            {"activity_id": activity.id},
            order_by=["question_order", "created_at"],
        )
        if not rows:
            return None

        choice_rows = await store.select_where(
            self.choices,
            {"question_id": [q.id for q in rows]},
            order_by="order",
        )
        by_question: Dict[uuid.UUID, List[ChoicePayload]] = {}
        for choice in choice_rows:
            by_question.setdefault(choice.question_id, []).append(ChoicePayload.model_validate(choice))

        questions = []
        for row in rows:
            question = QuestionPayload.model_validate(row)
            question.choices = by_question.get(row.id, [])
            questions.append(question)
        return QuizPayload(questions=questions)

    async def save(self, store: RecordStore, activity: Activity, payload: QuizPayload) -> None:
        existing = await store.select_where(self.questions, {"activity_id": activity.id})
        existing_ids = {q.id for q in existing}
        kept_ids = {q.id for q in payload.questions if q.id in existing_ids}

        dropped = list(existing_ids - kept_ids)
        if dropped:
            await store.delete_where(self.choices, {"question_id": dropped})
            await store.delete_where(self.questions, {"id": dropped})

        # A repeated id only updates its row once; later copies become new rows
        claimed = set()
        for position, question in enumerate(payload.questions):
            values = self._question_values(question, position)
            if question.id in kept_ids and question.id not in claimed:
                question_id = question.id
                claimed.add(question_id)
                await store.update_where(self.questions, {"id": question_id}, values)
            else:
                row = await store.insert(self.questions, {"activity_id": activity.id, **values})
                question_id = row.id
            await self._rewrite_choices(store, question_id, question.choices)

        logger.debug(
            "Quiz saved",
            extra={
                "activity_id": str(activity.id),
                "questions": len(payload.questions),
                "dropped": len(dropped),
            },
        )

    async def delete(self, store: RecordStore, activity: Activity) -> None:
        rows = await store.select_where(self.questions, {"activity_id": activity.id})
        if rows:
            await store.delete_where(self.choices, {"question_id": [q.id for q in rows]})
        await store.delete_where(self.questions, {"activity_id": activity.id})

    async def _rewrite_choices(
        self,
        store: RecordStore,
        question_id: uuid.UUID,
        choices: List[ChoicePayload],
    ) -> None:
        await store.delete_where(self.choices, {"question_id": question_id})
        for position, choice in enumerate(choices):
            await store.insert(
                self.choices,
                {
                    "question_id": question_id,
                    "choice_text": choice.choice_text,
                    "is_correct": choice.is_correct,
                    "order": position,
                },
            )

    @staticmethod
    def _question_values(question: QuestionPayload, position: int) -> Dict[str, Any]:
        return {
            "question_order": position,
            "question_title": question.question_title,
            "question_text": question.question_text,
            "question_type": question.question_type.value if question.question_type else None,
            "part_b": question.part_b,
            "published": question.published,
        }
