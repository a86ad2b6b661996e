"""
Repository for health record database operations.

HealthRecordRepository is the SQLite-backed RecordStore. All SQL lives here;
the service and API layers never see a cursor.
"""
import logging
import sqlite3
from typing import List, Tuple

from vitals_tracker.core.datetime_utils import format_iso, parse_datetime
from vitals_tracker.models.health_record import HealthRecord, NewHealthRecord
from vitals_tracker.repositories.base import Database
from vitals_tracker.repositories.record_store import new_record_id

logger = logging.getLogger(__name__)

_COLUMNS = "id, timestamp, systolic, diastolic, glycemia, heart_rate, note"


def _row_to_record(row: Tuple) -> HealthRecord:
    return HealthRecord(
        id=row[0],
        timestamp=parse_datetime(row[1]),
        systolic=row[2],
        diastolic=row[3],
        glycemia=row[4],
        heart_rate=row[5],
        note=row[6],
    )


class HealthRecordRepository:
    """
    SQLite implementation of the RecordStore protocol.

    Should be instantiated via core.dependencies.get_record_store().
    """

    def __init__(self, db: Database):
        """
        Args:
            db: Database instance for data access.
        """
        self._db = db

    def add(self, new_record: NewHealthRecord) -> HealthRecord:
        """
        Insert a record and return it as stored.

        The row is read back inside the same transaction so the returned
        record reflects exactly what was persisted.
        """
        record_id = new_record_id()
        conn = self._db.get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(f"""
                INSERT INTO health_records ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                record_id,
                format_iso(new_record.timestamp),
                new_record.systolic,
                new_record.diastolic,
                new_record.glycemia,
                new_record.heart_rate,
                new_record.note,
            ))
            cursor.execute(f"SELECT {_COLUMNS} FROM health_records WHERE id = ?", (record_id,))
            row = cursor.fetchone()
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

        return _row_to_record(row)

    def list(self) -> List[HealthRecord]:
        """All records, newest timestamp first (latest insert first on ties)."""
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM health_records ORDER BY timestamp DESC, rowid DESC"
            ).fetchall()
        finally:
            conn.close()
        return [_row_to_record(row) for row in rows]

    def remove(self, record_id: str) -> bool:
        """Delete one record; False if the id is unknown."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM health_records WHERE id = ?", (record_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def clear(self) -> int:
        """Delete every record and return how many rows went."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM health_records")
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()
        logger.info(f"Cleared {deleted} health records")
        return deleted
