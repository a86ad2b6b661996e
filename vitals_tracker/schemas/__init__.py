"""
Pydantic schemas for API request/response validation.
"""
from vitals_tracker.schemas.health_record import (
    ClearRecordsResponse,
    HealthRecordCreate,
    HealthRecordResponse,
    MetricAverageResponse,
    SummaryResponse,
)

__all__ = [
    "ClearRecordsResponse",
    "HealthRecordCreate",
    "HealthRecordResponse",
    "MetricAverageResponse",
    "SummaryResponse",
]
