"""
Event Store service for append-only audit logging.

Composition services log every mutation here in the same session as the
change, so the event commits or rolls back together with it.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.kernel.models.event_log import EventLog, EventType
from lesson_activities.logging_config import get_request_id


class EventStore:
    """
    Service for managing the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.ACTIVITY_MOVED,
            entity_type="activity",
            entity_id=activity.id,
            lesson_id=activity.lesson_id,
            payload={"from": 2, "to": 0},
        )
    """

    def __init__(self, session: AsyncSession, ip_address: Optional[str] = None):
        self.session = session
        self.ip_address = ip_address

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        lesson_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> EventLog:
        """
        Log an event to the immutable audit log.

        Args:
            event_type: The type of event
            entity_type: "activity", "lesson" or "lesson_plan_direction"
            entity_id: The ID of the entity
            lesson_id: Owning lesson, when known
            payload: Additional event data

        Returns:
            The pending EventLog record (flushed with the caller's session)
        """
        if payload:
            payload = self._serialize_payload(payload)

        event = EventLog(
            event_type=EventType(event_type).value,
            entity_type=entity_type,
            entity_id=entity_id,
            lesson_id=lesson_id,
            payload=payload or {},
            request_id=get_request_id(),
            ip_address=self.ip_address,
        )

        self.session.add(event)
        return event

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: uuid.UUID,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """Events for one entity, newest first."""
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == entity_id,
            )
        )
        if event_types:
            query = query.where(EventLog.event_type.in_([e.value for e in event_types]))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        await self.session.flush()
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_lesson_history(
        self,
        lesson_id: uuid.UUID,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """All events recorded against a lesson's activities, newest first."""
        query = select(EventLog).where(EventLog.lesson_id == lesson_id)
        if since:
            query = query.where(EventLog.created_at >= since)
        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        await self.session.flush()
        result = await self.session.execute(query)
        return list(result.scalars().all())

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert payload values to JSON-serializable types."""
        return {key: self._serialize_value(value) for key, value in payload.items()}

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return self._serialize_payload(value)
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v) for v in value]
        return value
