"""
Reference guard for activity deletion.

Lesson plan directions may point at an activity. Before an activity is
deleted the guard looks for such directions and, if there are any, waits
for a policy:

- keep: directions survive with their activity reference cleared
- delete: directions are deleted together with the activity
- cancel: nothing changes

Valid state transitions are defined in _TRANSITIONS; anything else raises
InvalidGuardTransition.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.composition import errors
from lesson_activities.composition.activity_list import ActivityListManager
from lesson_activities.kernel.events import EventStore
from lesson_activities.kernel.models import Activity, EventType
from lesson_activities.kernel.store import RecordStore
from lesson_activities.logging_config import get_logger

logger = get_logger(__name__)

DIRECTIONS = "lesson_plan_directions"


class GuardState(str, Enum):
    IDLE = "idle"
    CHECKING_REFERENCES = "checking_references"
    NO_REFERENCES = "no_references"
    DELETING = "deleting"
    HAS_REFERENCES = "has_references"
    AWAITING_POLICY_CHOICE = "awaiting_policy_choice"
    KEEP_CHOSEN = "keep_chosen"
    DECOUPLING_THEN_DELETING = "decoupling_then_deleting"
    DELETE_CHOSEN = "delete_chosen"
    CASCADING_DELETE = "cascading_delete"
    CANCELLED = "cancelled"


class DeletePolicy(str, Enum):
    KEEP = "keep"
    DELETE = "delete"
    CANCEL = "cancel"


_TRANSITIONS: Dict[GuardState, Set[GuardState]] = {
    GuardState.IDLE: {GuardState.CHECKING_REFERENCES},
    # A failed check is treated as a cancellation
    GuardState.CHECKING_REFERENCES: {
        GuardState.NO_REFERENCES,
        GuardState.HAS_REFERENCES,
        GuardState.CANCELLED,
    },
    GuardState.NO_REFERENCES: {GuardState.DELETING, GuardState.CANCELLED},
    GuardState.DELETING: {GuardState.IDLE},
    GuardState.HAS_REFERENCES: {GuardState.AWAITING_POLICY_CHOICE},
    GuardState.AWAITING_POLICY_CHOICE: {
        GuardState.KEEP_CHOSEN,
        GuardState.DELETE_CHOSEN,
        GuardState.CANCELLED,
    },
    GuardState.KEEP_CHOSEN: {GuardState.DECOUPLING_THEN_DELETING},
    GuardState.DECOUPLING_THEN_DELETING: {GuardState.IDLE},
    GuardState.DELETE_CHOSEN: {GuardState.CASCADING_DELETE},
    GuardState.CASCADING_DELETE: {GuardState.IDLE},
    GuardState.CANCELLED: {GuardState.IDLE},
}


def valid_transitions(from_state: GuardState) -> List[GuardState]:
    """Return list of valid target states from given state."""
    return sorted(_TRANSITIONS.get(from_state, set()), key=lambda s: s.value)


def can_transition(from_state: GuardState, to_state: GuardState) -> bool:
    return to_state in _TRANSITIONS.get(from_state, set())


@dataclass
class ReferenceCheck:
    """Directions that point at an activity."""

    activity_id: uuid.UUID
    direction_ids: List[uuid.UUID] = field(default_factory=list)

    @property
    def has_references(self) -> bool:
        return bool(self.direction_ids)


@dataclass
class DeletionOutcome:
    activity_id: uuid.UUID
    deleted: bool
    policy: Optional[DeletePolicy] = None
    directions_decoupled: int = 0
    directions_deleted: int = 0
    remaining: List[Activity] = field(default_factory=list)


class ReferenceGuard:
    """
    One deletion at a time: check(), then resolve(policy).

    Usage:
        guard = ReferenceGuard(session)
        check = await guard.check(activity_id)
        if check.has_references:
            outcome = await guard.resolve(DeletePolicy.KEEP)
        else:
            outcome = await guard.resolve()
    """

    def __init__(self, session: AsyncSession, ip_address: Optional[str] = None):
        self.session = session
        self.store = RecordStore(session)
        self.events = EventStore(session, ip_address=ip_address)
        self.activities = ActivityListManager(session, ip_address=ip_address)
        self.state = GuardState.IDLE
        self.history: List[GuardState] = [GuardState.IDLE]
        self._activity: Optional[Activity] = None
        self._check: Optional[ReferenceCheck] = None

    def _transition(self, to_state: GuardState) -> None:
        if not can_transition(self.state, to_state):
            raise errors.InvalidGuardTransition(
                f"Invalid transition: {self.state.value} -> {to_state.value}"
            )
        self.state = to_state
        self.history.append(to_state)

    def _finish(self) -> None:
        self._transition(GuardState.IDLE)
        self._activity = None
        self._check = None

    def _cancel(self) -> None:
        self._transition(GuardState.CANCELLED)
        self._finish()

    async def _remove(self, activity: Activity) -> List[Activity]:
        """Delete and renumber; the guard is back in IDLE whether or not it worked."""
        try:
            return await self.activities.remove(activity)
        finally:
            self._finish()

    async def find_references(self, activity_id: uuid.UUID) -> List[uuid.UUID]:
        """Ids of directions referencing the activity, in direction order."""
        rows = await self.store.select_where(
            DIRECTIONS,
            {"activity_id": activity_id},
            order_by="direction_order",
        )
        return [row.id for row in rows]

    async def check(self, activity_id: uuid.UUID) -> ReferenceCheck:
        """Look up dependent directions. Nothing is modified."""
        self._transition(GuardState.CHECKING_REFERENCES)
        try:
            activity = await self.activities.get(activity_id)
            direction_ids = await self.find_references(activity_id)
        except errors.PersistenceError as exc:
            self._cancel()
            logger.warning(
                "Reference check failed; activity left untouched",
                extra={"activity_id": str(activity_id)},
            )
            raise errors.ReferenceCheckFailure(
                f"Could not determine lesson plan directions for activity {activity_id}"
            ) from exc
        except errors.ActivityNotFound:
            self._cancel()
            raise

        self._activity = activity
        self._check = ReferenceCheck(activity_id=activity_id, direction_ids=direction_ids)
        if direction_ids:
            self._transition(GuardState.HAS_REFERENCES)
            self._transition(GuardState.AWAITING_POLICY_CHOICE)
        else:
            self._transition(GuardState.NO_REFERENCES)
        return self._check

    async def resolve(
        self,
        policy: Optional[Union[DeletePolicy, str]] = None,
    ) -> DeletionOutcome:
        """
        Finish the deletion started by check().

        Without references any policy except cancel deletes the activity.
        With references a policy is required; None raises
        ReferencePolicyRequired and the guard keeps waiting.
        """
        if self._activity is None or self._check is None:
            raise errors.InvalidGuardTransition(f"resolve() called in state {self.state.value}")

        policy = DeletePolicy(policy) if policy is not None else None
        activity, check = self._activity, self._check

        if policy == DeletePolicy.CANCEL:
            self._cancel()
            logger.info("Activity deletion cancelled", extra={"activity_id": str(activity.id)})
            return DeletionOutcome(activity_id=check.activity_id, deleted=False, policy=policy)

        if self.state == GuardState.NO_REFERENCES:
            self._transition(GuardState.DELETING)
            remaining = await self._remove(activity)
            return DeletionOutcome(
                activity_id=check.activity_id,
                deleted=True,
                policy=policy,
                remaining=remaining,
            )

        if self.state != GuardState.AWAITING_POLICY_CHOICE:
            raise errors.InvalidGuardTransition(f"resolve() called in state {self.state.value}")
        if policy is None:
            raise errors.ReferencePolicyRequired(check.activity_id, check.direction_ids)

        if policy == DeletePolicy.KEEP:
            self._transition(GuardState.KEEP_CHOSEN)
            self._transition(GuardState.DECOUPLING_THEN_DELETING)
            decoupled = await self.store.update_where(
                DIRECTIONS,
                {"id": check.direction_ids},
                {"activity_id": None},
            )
            await self.events.log(
                event_type=EventType.DIRECTIONS_DECOUPLED,
                entity_type="activity",
                entity_id=activity.id,
                lesson_id=activity.lesson_id,
                payload={"direction_ids": check.direction_ids},
            )
            remaining = await self._remove(activity)
            logger.info(
                "Activity deleted; directions kept",
                extra={"activity_id": str(check.activity_id), "directions": decoupled},
            )
            return DeletionOutcome(
                activity_id=check.activity_id,
                deleted=True,
                policy=policy,
                directions_decoupled=decoupled,
                remaining=remaining,
            )

        self._transition(GuardState.DELETE_CHOSEN)
        self._transition(GuardState.CASCADING_DELETE)
        removed = await self.store.delete_where(DIRECTIONS, {"id": check.direction_ids})
        await self.events.log(
            event_type=EventType.DIRECTIONS_DELETED,
            entity_type="activity",
            entity_id=activity.id,
            lesson_id=activity.lesson_id,
            payload={"direction_ids": check.direction_ids},
        )
        remaining = await self._remove(activity)
        logger.info(
            "Activity deleted with its directions",
            extra={"activity_id": str(check.activity_id), "directions": removed},
        )
        return DeletionOutcome(
            activity_id=check.activity_id,
            deleted=True,
            policy=policy,
            directions_deleted=removed,
            remaining=remaining,
        )

    async def delete(
        self,
        activity_id: uuid.UUID,
        policy: Optional[Union[DeletePolicy, str]] = None,
    ) -> DeletionOutcome:
        """check() and resolve() in one call, as the DELETE endpoint does."""
        await self.check(activity_id)
        return await self.resolve(policy)
