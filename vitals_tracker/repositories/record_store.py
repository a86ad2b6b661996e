"""
RecordStore interface and the in-memory backend.

The service layer depends on the RecordStore protocol only; which backend
sits behind it (SQLite, memory) is decided in core.dependencies.
"""
import logging
import threading
import uuid
from typing import List, Protocol, runtime_checkable

from vitals_tracker.models.health_record import HealthRecord, NewHealthRecord

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    """Opaque, unique record identifier."""
    return uuid.uuid4().hex


@runtime_checkable
class RecordStore(Protocol):
    """Persistence for health records: list, add, remove, clear."""

    def list(self) -> List[HealthRecord]:
        """All records, newest timestamp first."""
        ...

    def add(self, new_record: NewHealthRecord) -> HealthRecord:
        """Persist a record and return it with its assigned id."""
        ...

    def remove(self, record_id: str) -> bool:
        """Delete one record; False if no record has that id."""
        ...

    def clear(self) -> int:
        """Delete every record and return how many were removed."""
        ...


class InMemoryRecordStore:
    """
    Process-local RecordStore.

    Records live in a list guarded by a lock; nothing survives a restart.
    """

    def __init__(self) -> None:
        self._records: List[HealthRecord] = []
        self._lock = threading.Lock()

    def list(self) -> List[HealthRecord]:
        with self._lock:
            snapshot = list(self._records)
        # Newest insert first, then a stable sort keeps it first among equal timestamps
        return sorted(reversed(snapshot), key=lambda record: record.timestamp, reverse=True)

    def add(self, new_record: NewHealthRecord) -> HealthRecord:
        record = HealthRecord.from_new(new_record_id(), new_record)
        with self._lock:
            self._records.append(record)
        logger.debug("Record added to memory store", extra={"record_id": record.id})
        return record

    def remove(self, record_id: str) -> bool:
        with self._lock:
            remaining = [record for record in self._records if record.id != record_id]
            removed = len(remaining) != len(self._records)
            self._records = remaining
        return removed

    def clear(self) -> int:
        with self._lock:
            count = len(self._records)
            self._records = []
        return count
