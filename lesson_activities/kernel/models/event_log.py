"""
Append-only audit log of composition changes.

Every mutation is logged here in the same session as the change itself,
so an event exists only if the change was committed.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, func, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lesson_activities.kernel.models.base import Base, generate_uuid


class EventType(str, Enum):
    """All event types for the audit log."""

    # Activity list
    ACTIVITY_CREATED = "activity.created"
    ACTIVITY_UPDATED = "activity.updated"
    ACTIVITY_MOVED = "activity.moved"
    ACTIVITY_DELETED = "activity.deleted"
    ACTIVITIES_RENUMBERED = "activities.renumbered"

    # Payload
    PAYLOAD_SAVED = "activity.payload_saved"

    # Reference guard
    DIRECTIONS_DECOUPLED = "directions.decoupled"
    DIRECTIONS_DELETED = "directions.deleted"


class EventLog(Base):
    """
    Immutable audit event log.

    Rows are inserted only; nothing in the service updates or deletes them.
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )

    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Entity reference
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )
    lesson_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
        index=True,
    )

    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    # Request metadata
    request_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )
    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_lesson_time", "lesson_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"
