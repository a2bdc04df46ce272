"""Orchestration layer - reference-aware activity deletion."""

from lesson_activities.orchestration.reference_guard import (
    DeletePolicy,
    DeletionOutcome,
    GuardState,
    ReferenceCheck,
    ReferenceGuard,
)

__all__ = [
    "DeletePolicy",
    "DeletionOutcome",
    "GuardState",
    "ReferenceCheck",
    "ReferenceGuard",
]
