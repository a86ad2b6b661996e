"""
Service layer for health record operations.

Architecture:
    API Layer (routers) → HealthService → RecordStore → SQLite / memory

HealthService owns the record lifecycle and is the only place that knows
about the store. The analytics layer receives plain record lists from it.
"""
import logging
from datetime import datetime, tzinfo
from typing import Callable, List, Optional

from vitals_tracker.analytics.date_filters import DateFilter, apply_date_filter
from vitals_tracker.analytics.statistics import MetricAverage, summarize
from vitals_tracker.core.exceptions import DatabaseError, InvalidRecordDataError, RecordNotFoundError
from vitals_tracker.models.health_record import HealthRecord, NewHealthRecord
from vitals_tracker.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)


class HealthService:
    """
    Business logic for health records.

    Validates submissions, delegates persistence to the injected store, and
    resolves "now" in the user's timezone for date filtering.
    """

    def __init__(
        self,
        record_store: RecordStore,
        tz: tzinfo,
        clock: Optional[Callable[[tzinfo], datetime]] = None,
    ):
        """
        Args:
            record_store: Any RecordStore backend.
            tz: Timezone in which calendar days ("today") are resolved.
            clock: Returns the current time in a timezone; defaults to datetime.now.
        """
        self._store = record_store
        self._tz = tz
        self._clock = clock or datetime.now

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        """Current instant in the user's timezone."""
        return self._clock(self._tz)

    def add_record(
        self,
        timestamp: Optional[datetime] = None,
        systolic: Optional[float] = None,
        diastolic: Optional[float] = None,
        glycemia: Optional[float] = None,
        heart_rate: Optional[float] = None,
        note: Optional[str] = None,
    ) -> HealthRecord:
        """
        Log a new record.

        Raises:
            InvalidRecordDataError: If no measurement and no note were given.
            DatabaseError: If the store fails.
        """
        new_record = NewHealthRecord(
            timestamp=timestamp or self.now(),
            systolic=systolic,
            diastolic=diastolic,
            glycemia=glycemia,
            heart_rate=heart_rate,
            note=note.strip() if note and note.strip() else None,
        )
        if not new_record.has_content():
            raise InvalidRecordDataError("A record needs at least one measurement or a note")

        try:
            record = self._store.add(new_record)
        except Exception as e:
            logger.error(f"Store error saving health record: {e}", exc_info=True)
            raise DatabaseError(operation="add_record") from e

        logger.info("Health record saved", extra={"record_id": record.id})
        return record

    def list_records(self, date_filter: Optional[DateFilter] = None) -> List[HealthRecord]:
        """All records newest first, optionally narrowed by a date filter."""
        records = self._list_all()
        if date_filter is None:
            return records
        return apply_date_filter(records, date_filter, self.now())

    def delete_record(self, record_id: str) -> None:
        """
        Delete one record.

        Raises:
            RecordNotFoundError: If no record has this id.
        """
        try:
            removed = self._store.remove(record_id)
        except Exception as e:
            logger.error(f"Store error deleting health record: {e}", exc_info=True)
            raise DatabaseError(operation="delete_record") from e

        if not removed:
            raise RecordNotFoundError(record_id=record_id)
        logger.info("Health record deleted", extra={"record_id": record_id})

    def clear_records(self) -> int:
        """Delete every record; returns the number removed."""
        try:
            deleted = self._store.clear()
        except Exception as e:
            logger.error(f"Store error clearing health records: {e}", exc_info=True)
            raise DatabaseError(operation="clear_records") from e

        logger.warning("All health records cleared", extra={"deleted": deleted})
        return deleted

    def summary(
        self,
        records: Optional[List[HealthRecord]] = None,
        now: Optional[datetime] = None,
    ) -> List[MetricAverage]:
        """
        All-time and trailing-7-day averages.

        Pass ``records`` (and ``now``) to summarize a list already read from
        the store; otherwise every stored record is read.
        """
        if records is None:
            records = self._list_all()
        return summarize(records, now or self.now())

    def _list_all(self) -> List[HealthRecord]:
        try:
            return self._store.list()
        except Exception as e:
            logger.error(f"Store error listing health records: {e}", exc_info=True)
            raise DatabaseError(operation="list_records") from e
