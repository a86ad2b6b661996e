"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from vitals_tracker.api.routers.health import router as health_router
from vitals_tracker.api.routers.records import router as records_router
from vitals_tracker.api.routers.reports import router as reports_router

__all__ = ["health_router", "records_router", "reports_router"]
