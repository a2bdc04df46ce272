"""Activity list endpoints: list, insert, rename, move, delete."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, status

from lesson_activities.api.deps import ClientIp, DbSession
from lesson_activities.composition.activity_list import ActivityListManager
from lesson_activities.orchestration.reference_guard import DeletePolicy, ReferenceGuard
from lesson_activities.schemas.activity import (
    ActivityCreate,
    ActivityListItem,
    ActivityListResponse,
    ActivityMove,
    ActivityResponse,
    ActivityUpdate,
    DeletionResponse,
    ReferenceCheckResponse,
)
from lesson_activities.schemas.common import ConflictResponse, ErrorResponse

router = APIRouter()


@router.get("/lessons/{lesson_id}/activities", response_model=ActivityListResponse)
async def list_activities(lesson_id: uuid.UUID, db: DbSession):
    """List a lesson's activities in order, each with a short preview."""
    manager = ActivityListManager(db)
    rows = await manager.list_with_previews(lesson_id)
    items = [
        ActivityListItem(
            **ActivityResponse.model_validate(activity).model_dump(),
            preview=preview,
        )
        for activity, preview in rows
    ]
    return ActivityListResponse(lesson_id=lesson_id, activities=items, total=len(items))


@router.post(
    "/lessons/{lesson_id}/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    lesson_id: uuid.UUID,
    data: ActivityCreate,
    db: DbSession,
    ip: ClientIp,
):
    """Append an activity to the lesson with an empty payload."""
    manager = ActivityListManager(db, ip_address=ip)
    activity = await manager.insert(
        lesson_id,
        data.activity_type,
        name=data.name,
        published=data.published,
    )
    return ActivityResponse.model_validate(activity)


@router.get("/activities/{activity_id}", response_model=ActivityResponse)
async def get_activity(activity_id: uuid.UUID, db: DbSession):
    """Get an activity."""
    activity = await ActivityListManager(db).get(activity_id)
    return ActivityResponse.model_validate(activity)


@router.patch("/activities/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: uuid.UUID,
    data: ActivityUpdate,
    db: DbSession,
    ip: ClientIp,
):
    """Rename or (un)publish an activity."""
    manager = ActivityListManager(db, ip_address=ip)
    activity = await manager.update(activity_id, data.model_dump(exclude_unset=True))
    return ActivityResponse.model_validate(activity)


@router.post("/activities/{activity_id}/move", response_model=List[ActivityResponse])
async def move_activity(
    activity_id: uuid.UUID,
    data: ActivityMove,
    db: DbSession,
    ip: ClientIp,
):
    """Move an activity and return the lesson's renumbered list."""
    manager = ActivityListManager(db, ip_address=ip)
    ordered = await manager.move(activity_id, data.new_index)
    return [ActivityResponse.model_validate(a) for a in ordered]


@router.get("/activities/{activity_id}/references", response_model=ReferenceCheckResponse)
async def get_activity_references(activity_id: uuid.UUID, db: DbSession):
    """Lesson plan directions that would be affected by deleting the activity."""
    check = await ReferenceGuard(db).check(activity_id)
    return ReferenceCheckResponse(
        activity_id=check.activity_id,
        has_references=check.has_references,
        direction_ids=check.direction_ids,
    )


@router.delete(
    "/activities/{activity_id}",
    response_model=DeletionResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ConflictResponse},
    },
)
async def delete_activity(
    activity_id: uuid.UUID,
    db: DbSession,
    ip: ClientIp,
    policy: Optional[DeletePolicy] = Query(
        None,
        description="Required when lesson plan directions reference the activity",
    ),
):
    """
    Delete an activity and its payload, then renumber the lesson.

    Referenced activities need policy=keep (directions survive, unlinked)
    or policy=delete (directions removed too); without one the response is
    409 with the referencing direction ids.
    """
    guard = ReferenceGuard(db, ip_address=ip)
    outcome = await guard.delete(activity_id, policy)
    return DeletionResponse(
        activity_id=outcome.activity_id,
        deleted=outcome.deleted,
        policy=outcome.policy,
        directions_decoupled=outcome.directions_decoupled,
        directions_deleted=outcome.directions_deleted,
        remaining=[ActivityResponse.model_validate(a) for a in outcome.remaining],
    )
