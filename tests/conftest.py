"""
Shared pytest fixtures.

Fixture Hierarchy:
    temp_db → record_repo → health_service → test_app → client

Key patterns:
1. Database Isolation: each test gets a fresh temporary SQLite file
2. Fixed Clock: services see the same "now" on every call
3. DI Override: app.dependency_overrides injects test services into the real routers
"""
import os
import tempfile
from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Must be set before config is imported; keeps tests from creating ./data
os.environ.setdefault("VITALS_STORE_BACKEND", "memory")
os.environ.setdefault("VITALS_TIMEZONE", "UTC")

from vitals_tracker.core import dependencies as deps
from vitals_tracker.core.exceptions import setup_exception_handlers
from vitals_tracker.core.middleware import LoggingMiddleware
from vitals_tracker.models.health_record import HealthRecord
from vitals_tracker.repositories import HealthRecordRepository, InMemoryRecordStore
from vitals_tracker.repositories.base import Database
from vitals_tracker.services.graph import GraphService
from vitals_tracker.services.health_service import HealthService
from vitals_tracker.services.report import ReportService

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock(tz):
    """Clock for services: always FIXED_NOW, expressed in the requested zone."""
    return FIXED_NOW.astimezone(tz)


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    This fixture creates a fresh SQLite database in a temp file,
    ensuring complete isolation between tests.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    # WAL mode leaves side files next to the database
    for path in (db_path, db_path + "-wal", db_path + "-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def record_repo(temp_db):
    """SQLite RecordStore over the temporary database."""
    return HealthRecordRepository(db=temp_db)


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()


@pytest.fixture
def health_service(record_repo):
    """HealthService over SQLite with a fixed clock in UTC."""
    return HealthService(record_store=record_repo, tz=timezone.utc, clock=fixed_clock)


@pytest.fixture
def graph_service():
    return GraphService(tz=timezone.utc)


@pytest.fixture
def report_service(graph_service):
    """ReportService without chart images (no kaleido needed)."""
    return ReportService(
        graph_service=graph_service,
        tz=timezone.utc,
        title="Test Report",
        include_charts=False,
        clock=fixed_clock,
    )


@pytest.fixture
def make_record():
    """
    Factory for HealthRecord instances with sequential ids.

    Usage:
        record = make_record(datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc), glycemia=95)
    """
    ids = count(1)

    def _make(timestamp, **measurements):
        return HealthRecord(id=f"rec-{next(ids)}", timestamp=timestamp, **measurements)

    return _make


@pytest.fixture
def test_app(temp_db, record_repo, health_service, graph_service, report_service):
    """
    Create a FastAPI test app with dependency overrides.

    Uses the real routers, with test services injected via
    dependency_overrides and the production exception handlers.
    """
    from vitals_tracker.api.routers import health_router, records_router, reports_router

    app = FastAPI(title="Vitals Tracker API Test")

    setup_exception_handlers(app)
    app.add_middleware(LoggingMiddleware)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_record_store] = lambda: record_repo
    app.dependency_overrides[deps.get_health_service] = lambda: health_service
    app.dependency_overrides[deps.get_graph_service] = lambda: graph_service
    app.dependency_overrides[deps.get_report_service] = lambda: report_service

    app.include_router(health_router)
    app.include_router(records_router)
    app.include_router(reports_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)
