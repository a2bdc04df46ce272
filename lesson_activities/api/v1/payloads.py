"""Payload endpoints, including single-step vocabulary and quiz edits."""

import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query, status
from pydantic import BaseModel

from lesson_activities.api.deps import ClientIp, DbSession
from lesson_activities.composition.activity_list import ActivityListManager
from lesson_activities.composition.nested_order import QuizEditor, VocabularyEditor, new_question
from lesson_activities.composition.payload_editor import PayloadEditor
from lesson_activities.kernel.models import Activity, QuestionType
from lesson_activities.schemas.common import ErrorResponse
from lesson_activities.schemas.payload import (
    ChoiceCreate,
    ItemMove,
    PayloadResponse,
    QuestionPayload,
    QuestionTypeChange,
    VocabularyItemCreate,
)

router = APIRouter()


def _response(activity: Activity, payload: BaseModel) -> PayloadResponse:
    return PayloadResponse(
        activity_id=activity.id,
        activity_type=activity.activity_type,
        payload=payload.model_dump(mode="json"),
    )


@router.get("/activities/{activity_id}/payload", response_model=PayloadResponse)
async def get_payload(activity_id: uuid.UUID, db: DbSession):
    """Load the activity's payload, or its empty default if never saved."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await PayloadEditor(db).load(activity)
    return _response(activity, payload)


@router.put(
    "/activities/{activity_id}/payload",
    response_model=PayloadResponse,
    responses={status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse}},
)
async def save_payload(
    activity_id: uuid.UUID,
    db: DbSession,
    ip: ClientIp,
    data: Dict[str, Any] = Body(...),
):
    """Validate and save the payload for the activity's type."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await PayloadEditor(db, ip_address=ip).save(activity, data)
    return _response(activity, payload)


# Vocabulary

@router.post(
    "/activities/{activity_id}/vocabulary/items",
    response_model=PayloadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_vocabulary_item(
    activity_id: uuid.UUID,
    data: VocabularyItemCreate,
    db: DbSession,
    ip: ClientIp,
):
    """Append a term to a vocabulary activity."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await VocabularyEditor(db, ip_address=ip).add_item(
        activity, word=data.word, definition=data.definition
    )
    return _response(activity, payload)


@router.delete("/activities/{activity_id}/vocabulary/items/{index}", response_model=PayloadResponse)
async def remove_vocabulary_item(
    activity_id: uuid.UUID,
    index: int,
    db: DbSession,
    ip: ClientIp,
):
    """Remove a term. The last remaining term cannot be removed."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await VocabularyEditor(db, ip_address=ip).remove_item(activity, index)
    return _response(activity, payload)


@router.post("/activities/{activity_id}/vocabulary/items/{index}/move", response_model=PayloadResponse)
async def move_vocabulary_item(
    activity_id: uuid.UUID,
    index: int,
    data: ItemMove,
    db: DbSession,
    ip: ClientIp,
):
    """Swap a term with its neighbour."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await VocabularyEditor(db, ip_address=ip).move_item(activity, index, data.direction)
    return _response(activity, payload)


# Quiz

_INVALID = {status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse}}


@router.get("/quiz/question-template", response_model=QuestionPayload)
async def question_template(question_type: Optional[QuestionType] = Query(None)):
    """A blank question to fill in; choice-based types come with blank options."""
    return new_question(question_type)


@router.post(
    "/activities/{activity_id}/quiz/questions",
    response_model=PayloadResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_INVALID,
)
async def add_quiz_question(
    activity_id: uuid.UUID,
    data: QuestionPayload,
    db: DbSession,
    ip: ClientIp,
):
    """Append a complete question to the quiz."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).add_question(activity, data)
    return _response(activity, payload)


@router.delete("/activities/{activity_id}/quiz/questions/{index}", response_model=PayloadResponse)
async def remove_quiz_question(
    activity_id: uuid.UUID,
    index: int,
    db: DbSession,
    ip: ClientIp,
):
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).remove_question(activity, index)
    return _response(activity, payload)


@router.put(
    "/activities/{activity_id}/quiz/questions/{index}/type",
    response_model=PayloadResponse,
    responses=_INVALID,
)
async def change_question_type(
    activity_id: uuid.UUID,
    index: int,
    data: QuestionTypeChange,
    db: DbSession,
    ip: ClientIp,
):
    """Change a question's type, optionally replacing its choices."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).set_question_type(
        activity, index, data.question_type, data.choices
    )
    return _response(activity, payload)


@router.post(
    "/activities/{activity_id}/quiz/questions/{question_index}/choices",
    response_model=PayloadResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_INVALID,
)
async def add_quiz_choice(
    activity_id: uuid.UUID,
    question_index: int,
    data: ChoiceCreate,
    db: DbSession,
    ip: ClientIp,
):
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).add_choice(
        activity, question_index, choice_text=data.choice_text, is_correct=data.is_correct
    )
    return _response(activity, payload)


@router.delete(
    "/activities/{activity_id}/quiz/questions/{question_index}/choices/{index}",
    response_model=PayloadResponse,
    responses=_INVALID,
)
async def remove_quiz_choice(
    activity_id: uuid.UUID,
    question_index: int,
    index: int,
    db: DbSession,
    ip: ClientIp,
):
    """Remove a choice. Choice-based questions keep at least two."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).remove_choice(activity, question_index, index)
    return _response(activity, payload)


@router.post(
    "/activities/{activity_id}/quiz/questions/{question_index}/choices/{index}/correct",
    response_model=PayloadResponse,
    responses=_INVALID,
)
async def mark_quiz_choice_correct(
    activity_id: uuid.UUID,
    question_index: int,
    index: int,
    db: DbSession,
    ip: ClientIp,
):
    """Multiple Select toggles the choice; other types make it the only correct one."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).mark_correct(activity, question_index, index)
    return _response(activity, payload)


@router.post("/activities/{activity_id}/quiz/questions/{index}/move", response_model=PayloadResponse)
async def move_quiz_question(
    activity_id: uuid.UUID,
    index: int,
    data: ItemMove,
    db: DbSession,
    ip: ClientIp,
):
    """Swap a question with its neighbour."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).move_question(activity, index, data.direction)
    return _response(activity, payload)


@router.post(
    "/activities/{activity_id}/quiz/questions/{question_index}/choices/{index}/move",
    response_model=PayloadResponse,
)
async def move_quiz_choice(
    activity_id: uuid.UUID,
    question_index: int,
    index: int,
    data: ItemMove,
    db: DbSession,
    ip: ClientIp,
):
    """Swap a choice with its neighbour within one question."""
    activity = await ActivityListManager(db).get(activity_id)
    payload = await QuizEditor(db, ip_address=ip).move_choice(
        activity, question_index, index, data.direction
    )
    return _response(activity, payload)
