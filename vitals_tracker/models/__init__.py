"""
Domain models for the vitals tracker.
"""
from vitals_tracker.models.health_record import MEASUREMENT_FIELDS, HealthRecord, NewHealthRecord

__all__ = ["HealthRecord", "NewHealthRecord", "MEASUREMENT_FIELDS"]
