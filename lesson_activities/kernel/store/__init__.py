"""
Record Store - collection-addressed access to the kernel tables.
"""

from lesson_activities.kernel.store.record_store import COLLECTIONS, RecordStore

__all__ = ["COLLECTIONS", "RecordStore"]
