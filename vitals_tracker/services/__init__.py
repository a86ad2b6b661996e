"""
Service layer for business logic.

Graph and report services live in their own packages and are not
re-exported here; import them from vitals_tracker.services.graph and
vitals_tracker.services.report.
"""
from vitals_tracker.services.health_service import HealthService

__all__ = [
    "HealthService",
]
