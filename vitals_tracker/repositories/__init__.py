"""
Repository layer for record persistence.

Every backend implements the RecordStore protocol.
"""
from vitals_tracker.repositories.base import Database
from vitals_tracker.repositories.health_record_repository import HealthRecordRepository
from vitals_tracker.repositories.record_store import InMemoryRecordStore, RecordStore

__all__ = [
    "Database",
    "HealthRecordRepository",
    "InMemoryRecordStore",
    "RecordStore",
]
