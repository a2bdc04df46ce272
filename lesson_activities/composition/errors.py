"""
Error kinds raised by the activity composition services.

Each error carries the HTTP status the API maps it to, so routes can let
them propagate to the handler registered in main.py.
"""

import uuid
from typing import Any, Dict, List, Optional


class CompositionError(Exception):
    """Base class for all composition failures."""

    status_code: int = 500
    code: str = "composition_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(CompositionError):
    """A required payload field is missing or malformed. Raised before any store call."""

    status_code = 422
    code = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class PersistenceError(CompositionError):
    """The record store call failed."""

    status_code = 503
    code = "persistence_error"


class ReferenceCheckFailure(CompositionError):
    """Dependent lesson plan directions could not be determined."""

    status_code = 503
    code = "reference_check_failed"


class RenumberPartialFailure(CompositionError):
    """The primary change went through but the follow-up renumber did not."""

    status_code = 503
    code = "renumber_failed"

    def __init__(self, message: str, lesson_id: Optional[uuid.UUID] = None):
        super().__init__(message)
        self.lesson_id = lesson_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["hint"] = "Re-fetch the activity list before retrying"
        if self.lesson_id:
            data["lesson_id"] = str(self.lesson_id)
        return data


class ActivityNotFound(CompositionError):
    status_code = 404
    code = "activity_not_found"

    def __init__(self, activity_id: uuid.UUID):
        super().__init__(f"Activity {activity_id} not found")
        self.activity_id = activity_id


class UnknownActivityType(CompositionError):
    status_code = 400
    code = "unknown_activity_type"

    def __init__(self, activity_type: Any):
        super().__init__(f"Unknown activity type: {activity_type!r}")
        self.activity_type = activity_type


class OrderingError(CompositionError):
    """Bad index or a removal that would go below the list minimum."""

    status_code = 400
    code = "ordering_error"


class ReferencePolicyRequired(CompositionError):
    """Delete of a referenced activity was requested without keep/delete."""

    status_code = 409
    code = "reference_policy_required"

    def __init__(self, activity_id: uuid.UUID, direction_ids: List[uuid.UUID]):
        super().__init__(
            f"Activity {activity_id} is referenced by {len(direction_ids)} "
            "lesson plan direction(s); choose policy=keep or policy=delete"
        )
        self.activity_id = activity_id
        self.direction_ids = direction_ids

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["direction_ids"] = [str(d) for d in self.direction_ids]
        return data


class InvalidGuardTransition(CompositionError):
    status_code = 500
    code = "invalid_guard_transition"
