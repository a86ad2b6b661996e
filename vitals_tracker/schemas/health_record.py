"""
Pydantic schemas for health record API operations.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from vitals_tracker.analytics.classifier import is_blood_pressure_abnormal, is_glycemia_abnormal
from vitals_tracker.core.datetime_utils import format_iso
from vitals_tracker.models.health_record import HealthRecord


class HealthRecordCreate(BaseModel):
    """Schema for logging a new health record.

    Every measurement is optional, but at least one measurement or a note
    must be present. The timestamp defaults to the time of submission.
    """
    timestamp: Optional[datetime] = Field(
        None,
        description="ISO format datetime of the measurement (defaults to now)",
        examples=["2025-01-01T08:30:00-03:00"],
    )
    systolic: Optional[float] = Field(None, gt=0, le=300, description="Systolic pressure in mmHg", examples=[120])
    diastolic: Optional[float] = Field(None, gt=0, le=250, description="Diastolic pressure in mmHg", examples=[80])
    glycemia: Optional[float] = Field(None, gt=0, le=1500, description="Blood glucose in mg/dL", examples=[95])
    heart_rate: Optional[float] = Field(None, gt=0, le=300, description="Heart rate in bpm", examples=[72])
    note: Optional[str] = Field(None, max_length=1000, description="Free-text observation", examples=["After lunch"])

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "timestamp": "2025-01-01T08:30:00-03:00",
                "systolic": 120,
                "diastolic": 80,
                "glycemia": 95,
                "heart_rate": 72,
                "note": "Fasting",
            }
        }
    )


class HealthRecordResponse(BaseModel):
    """Schema for a stored health record, with abnormality flags."""
    id: str = Field(..., description="Opaque record identifier")
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp of the measurement")
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    glycemia: Optional[float] = None
    heart_rate: Optional[float] = None
    note: Optional[str] = None
    blood_pressure_abnormal: bool = Field(False, description="Systolic or diastolic outside its normal band")
    glycemia_abnormal: bool = Field(False, description="Glycemia outside its normal band")

    @classmethod
    def from_record(cls, record: HealthRecord) -> "HealthRecordResponse":
        return cls(
            id=record.id,
            timestamp=format_iso(record.timestamp),
            systolic=record.systolic,
            diastolic=record.diastolic,
            glycemia=record.glycemia,
            heart_rate=record.heart_rate,
            note=record.note,
            blood_pressure_abnormal=is_blood_pressure_abnormal(record.systolic, record.diastolic),
            glycemia_abnormal=is_glycemia_abnormal(record.glycemia),
        )


class MetricAverageResponse(BaseModel):
    """Averages for one metric; null means no measurements in that period."""
    metric: str = Field(..., examples=["glycemia"])
    label: str = Field(..., examples=["Glycemia (mg/dL)"])
    unit: str = Field(..., examples=["mg/dL"])
    all_time_average: Optional[float] = None
    last_7_days_average: Optional[float] = None


class SummaryResponse(BaseModel):
    """Per-metric averages over all records and over the trailing 7 days."""
    generated_at: str
    record_count: int
    metrics: List[MetricAverageResponse]


class ClearRecordsResponse(BaseModel):
    """Result of deleting every record."""
    deleted: int
