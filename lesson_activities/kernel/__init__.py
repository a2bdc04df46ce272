"""
Kernel Layer

Foundations every other layer builds on:
- Data models (activities, typed payloads, lesson plan directions)
- Record Store (generic collection access over the models)
- Immutable Event Log (all mutations logged in the same session)

Services above the kernel reach the database through the Record Store.
"""

from lesson_activities.kernel.models import (
    Activity,
    ActivityType,
    EventLog,
    EventType,
    LessonPlanDirection,
)

__all__ = [
    "Activity",
    "ActivityType",
    "LessonPlanDirection",
    "EventLog",
    "EventType",
]
