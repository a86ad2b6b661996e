"""
Domain model for health records.

Measurements are optional: a single entry may report only blood pressure,
only glycemia, and so on. ``None`` always means "not measured".
"""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from vitals_tracker.core.datetime_utils import to_utc

MEASUREMENT_FIELDS = ("systolic", "diastolic", "glycemia", "heart_rate")


@dataclass(frozen=True)
class NewHealthRecord:
    """A record as submitted, before the store assigns an id."""

    timestamp: datetime
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    glycemia: Optional[float] = None
    heart_rate: Optional[float] = None
    note: Optional[str] = None

    def has_content(self) -> bool:
        """True when at least one measurement or a note was given."""
        if self.note and self.note.strip():
            return True
        return any(getattr(self, name) is not None for name in MEASUREMENT_FIELDS)


@dataclass(frozen=True)
class HealthRecord:
    """Model representing one logged observation."""

    id: str
    timestamp: datetime
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    glycemia: Optional[float] = None
    heart_rate: Optional[float] = None
    note: Optional[str] = None

    @classmethod
    def from_new(cls, record_id: str, new_record: NewHealthRecord) -> "HealthRecord":
        """Attach an id to a submitted record, normalizing its timestamp to UTC."""
        fields = asdict(new_record)
        fields["timestamp"] = to_utc(new_record.timestamp)
        return cls(id=record_id, **fields)

    def value_of(self, field: str) -> Optional[float]:
        """Measurement stored under ``field`` (None when absent)."""
        if field not in MEASUREMENT_FIELDS:
            raise KeyError(f"Unknown measurement field: '{field}'")
        return getattr(self, field)
