"""Record store backends."""

from app.store.base import RecordKind, RecordStore, sort_by_timestamp
from app.store.memory import InMemoryRecordStore

__all__ = ["RecordKind", "RecordStore", "InMemoryRecordStore", "sort_by_timestamp"]
