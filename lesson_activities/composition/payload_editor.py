"""
Polymorphic payload editor / saver.

Resolves an activity's type through the registry and loads or saves its
payload against the matching collection. Save validates first; a payload
that fails validation never reaches the store.
"""

from typing import Any, Mapping, Optional, Union

import pydantic
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.composition import errors
from lesson_activities.composition.registry import ActivityTypeSpec, get_spec
from lesson_activities.kernel.events import EventStore
from lesson_activities.kernel.models import Activity, EventType
from lesson_activities.kernel.store import RecordStore
from lesson_activities.logging_config import get_logger

logger = get_logger(__name__)


class PayloadEditor:
    """
    Load and save type-specific activity payloads.

    Usage:
        editor = PayloadEditor(session)
        payload = await editor.load(activity)
        payload.title = "The Silk Road"
        await editor.save(activity, payload)
    """

    def __init__(self, session: AsyncSession, ip_address: Optional[str] = None):
        self.session = session
        self.store = RecordStore(session)
        self.events = EventStore(session, ip_address=ip_address)

    def parse(self, activity: Activity, data: Mapping[str, Any]) -> BaseModel:
        """Build the activity type's payload model from raw request data."""
        spec = get_spec(activity.activity_type)
        try:
            return spec.payload_model.model_validate(data)
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(loc) for loc in first["loc"]) or "payload"
            raise errors.ValidationError(field, first["msg"]) from exc

    async def load_stored(self, activity: Activity) -> Optional[BaseModel]:
        """Stored payload, or None when the activity has never been saved."""
        spec = get_spec(activity.activity_type)
        return await spec.loader(self.store, activity)

    async def load(self, activity: Activity) -> BaseModel:
        """Stored payload, or the type's empty default for a new activity."""
        spec = get_spec(activity.activity_type)
        payload = await spec.loader(self.store, activity)
        if payload is None:
            return spec.default_payload()
        return payload

    async def save(
        self,
        activity: Activity,
        payload: Union[BaseModel, Mapping[str, Any]],
    ) -> BaseModel:
        """
        Validate and persist a payload, then return it as stored.

        Single-record types are upserted by activity_id. Vocabulary items
        and quiz choices are rewritten with order 0..n-1.
        """
        spec = get_spec(activity.activity_type)
        if isinstance(payload, Mapping):
            payload = self.parse(activity, payload)
        elif not isinstance(payload, spec.payload_model):
            raise errors.ValidationError(
                "payload",
                f"{spec.activity_type.value} activities take {spec.payload_model.__name__}",
            )

        payload.check()  # type: ignore[attr-defined]

        await spec.saver(self.store, activity, payload)
        await self.events.log(
            event_type=EventType.PAYLOAD_SAVED,
            entity_type="activity",
            entity_id=activity.id,
            lesson_id=activity.lesson_id,
            payload={"activity_type": spec.activity_type, "collection": spec.collection},
        )
        logger.info(
            "Payload saved",
            extra={"activity_id": str(activity.id), "activity_type": spec.activity_type.value},
        )
        return await self.load(activity)

    async def create_shell(self, activity: Activity) -> None:
        """Empty payload row for single-record types; nested types start with no rows."""
        spec: ActivityTypeSpec = get_spec(activity.activity_type)
        if spec.create_shell is not None:
            await spec.create_shell(self.store, activity)

    async def delete(self, activity: Activity) -> None:
        spec = get_spec(activity.activity_type)
        await spec.deleter(self.store, activity)
