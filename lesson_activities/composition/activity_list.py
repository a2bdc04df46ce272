"""
Activity List Manager.

Owns the ordered activity sequence of a lesson. Every reorder or delete
rewrites the whole lesson back to order values 0..n-1 in a single batch
write, computed against a fresh read so that re-running it is harmless.
"""

import uuid
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.composition import errors
from lesson_activities.composition.ordering import move_to_index, order_changes
from lesson_activities.composition.payload_editor import PayloadEditor
from lesson_activities.composition.registry import preview_for, resolve_type
from lesson_activities.kernel.events import EventStore
from lesson_activities.kernel.models import Activity, ActivityType, EventType
from lesson_activities.kernel.store import RecordStore
from lesson_activities.logging_config import get_logger

logger = get_logger(__name__)

COLLECTION = "activities"
_UPDATABLE_FIELDS = ("name", "published")


class ActivityListManager:
    """Insert, reorder, rename and remove the activities of a lesson."""

    def __init__(self, session: AsyncSession, ip_address: Optional[str] = None):
        self.session = session
        self.store = RecordStore(session)
        self.events = EventStore(session, ip_address=ip_address)
        self.payloads = PayloadEditor(session, ip_address=ip_address)

    async def list(self, lesson_id: uuid.UUID) -> List[Activity]:
        """Activities of a lesson sorted by order ascending."""
        return await self.store.select_where(
            COLLECTION,
            {"lesson_id": lesson_id},
            order_by=["order", "created_at"],
        )

    async def list_with_previews(self, lesson_id: uuid.UUID) -> List[Tuple[Activity, str]]:
        """Each activity paired with the short label shown in the lesson editor."""
        result = []
        for activity in await self.list(lesson_id):
            payload = await self.payloads.load_stored(activity)
            result.append((activity, preview_for(activity.activity_type, payload)))
        return result

    async def get(self, activity_id: uuid.UUID) -> Activity:
        activity = await self.store.select_one(COLLECTION, {"id": activity_id})
        if activity is None:
            raise errors.ActivityNotFound(activity_id)
        return activity

    async def insert(
        self,
        lesson_id: uuid.UUID,
        activity_type: Union[str, ActivityType],
        name: Optional[str] = None,
        published: bool = False,
    ) -> Activity:
        """Append a new activity at max(order) + 1 with an empty payload."""
        resolved = resolve_type(activity_type)
        existing = await self.list(lesson_id)
        next_order = max((a.order for a in existing), default=-1) + 1

        activity = await self.store.insert(
            COLLECTION,
            {
                "lesson_id": lesson_id,
                "activity_type": resolved.value,
                "order": next_order,
                "name": name,
                "published": published,
            },
        )
        await self.payloads.create_shell(activity)

        await self.events.log(
            event_type=EventType.ACTIVITY_CREATED,
            entity_type="activity",
            entity_id=activity.id,
            lesson_id=lesson_id,
            payload={"activity_type": resolved, "order": next_order, "name": name},
        )
        logger.info(
            "Activity created",
            extra={
                "activity_id": str(activity.id),
                "lesson_id": str(lesson_id),
                "activity_type": resolved.value,
                "order": next_order,
            },
        )
        return activity

    async def update(self, activity_id: uuid.UUID, changes: Mapping[str, Any]) -> Activity:
        """Rename or (un)publish an activity. Only name and published may change."""
        activity = await self.get(activity_id)
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise errors.ValidationError(sorted(unknown)[0], "Field cannot be changed here")
        if "published" in changes and changes["published"] is None:
            raise errors.ValidationError("published", "published cannot be null")

        patch = dict(changes)
        if patch:
            await self.store.update_where(COLLECTION, {"id": activity_id}, patch)
            await self.events.log(
                event_type=EventType.ACTIVITY_UPDATED,
                entity_type="activity",
                entity_id=activity_id,
                lesson_id=activity.lesson_id,
                payload=patch,
            )
        return await self.get(activity_id)

    async def move(self, activity_id: uuid.UUID, new_index: int) -> List[Activity]:
        """
        Move an activity to new_index (clamped to the list bounds) and rewrite
        every order in the lesson to its 0-based position.
        """
        activity = await self.get(activity_id)
        ordered = await self.list(activity.lesson_id)
        current = next(i for i, a in enumerate(ordered) if a.id == activity_id)

        reordered = move_to_index(ordered, current, new_index)
        target = next(i for i, a in enumerate(reordered) if a.id == activity_id)
        changes = order_changes(reordered)
        if changes:
            await self.store.update_many(COLLECTION, changes)
            await self.events.log(
                event_type=EventType.ACTIVITY_MOVED,
                entity_type="activity",
                entity_id=activity_id,
                lesson_id=activity.lesson_id,
                payload={"from": current, "to": target, "rows_written": len(changes)},
            )
        logger.info(
            "Activity moved",
            extra={
                "activity_id": str(activity_id),
                "from_index": current,
                "new_index": target,
                "rows_written": len(changes),
            },
        )
        return await self.list(activity.lesson_id)

    async def remove(self, activity: Activity) -> List[Activity]:
        """
        Delete an activity with its payload, then close the gap.

        Lesson plan directions must already be resolved; call this through
        the reference guard.
        """
        activity_id, lesson_id = activity.id, activity.lesson_id
        snapshot = {"activity_type": activity.activity_type, "order": activity.order}

        await self.payloads.delete(activity)
        await self.store.delete_where(COLLECTION, {"id": activity_id})
        await self.events.log(
            event_type=EventType.ACTIVITY_DELETED,
            entity_type="activity",
            entity_id=activity_id,
            lesson_id=lesson_id,
            payload=snapshot,
        )
        logger.info(
            "Activity deleted",
            extra={"activity_id": str(activity_id), "lesson_id": str(lesson_id)},
        )

        try:
            return await self.renumber(lesson_id)
        except errors.PersistenceError as exc:
            raise errors.RenumberPartialFailure(
                f"Activity {activity_id} was deleted but the lesson could not be renumbered",
                lesson_id=lesson_id,
            ) from exc

    async def renumber(self, lesson_id: uuid.UUID) -> List[Activity]:
        """Rewrite orders to 0..n-1, touching only rows that are out of place."""
        ordered = await self.list(lesson_id)
        changes: List[Dict[str, Any]] = order_changes(ordered)
        if changes:
            await self.store.update_many(COLLECTION, changes)
            await self.events.log(
                event_type=EventType.ACTIVITIES_RENUMBERED,
                entity_type="lesson",
                entity_id=lesson_id,
                lesson_id=lesson_id,
                payload={"rows_written": len(changes)},
            )
            ordered = await self.list(lesson_id)
        return ordered
