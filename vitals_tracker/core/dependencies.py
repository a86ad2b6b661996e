"""
FastAPI dependency injection for the Vitals Tracker API.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (HealthService, GraphService, ReportService)
         ↓ Injected
    RecordStore (SQLite repository or in-memory)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from vitals_tracker.core.dependencies import get_health_service

    @router.post("/records")
    async def create_record(
        record: HealthRecordCreate,
        health_service: HealthService = Depends(get_health_service)
    ):
        return health_service.add_record(...)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_record_store] = lambda: InMemoryRecordStore()
"""
import logging
from typing import Optional

from vitals_tracker.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# STORAGE DEPENDENCIES
# =============================================================================

# Imported lazily inside the functions below to keep core free of
# import cycles with repositories and services.
_database_instance: Optional["Database"] = None
_memory_store_instance: Optional["InMemoryRecordStore"] = None


def get_database() -> "Database":
    """
    Get the database instance (created once, then reused).

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        from vitals_tracker.repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.vitals_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def reset_database() -> None:
    """
    Drop the cached database and in-memory store (for testing only).
    """
    global _database_instance, _memory_store_instance
    _database_instance = None
    _memory_store_instance = None


def get_record_store() -> "RecordStore":
    """
    Get the configured RecordStore backend.

    ``sqlite`` returns a repository over the shared database; ``memory``
    returns a process-wide in-memory store.

    Returns:
        RecordStore: Backend for record persistence.
    """
    global _memory_store_instance

    if settings.vitals_store_backend == "memory":
        if _memory_store_instance is None:
            from vitals_tracker.repositories import InMemoryRecordStore

            logger.info("Using in-memory record store")
            _memory_store_instance = InMemoryRecordStore()
        return _memory_store_instance

    from vitals_tracker.repositories import HealthRecordRepository

    return HealthRecordRepository(db=get_database())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_health_service() -> "HealthService":
    """
    Get a HealthService over the configured record store.

    Returns:
        HealthService: Service for health record operations.
    """
    from vitals_tracker.services import HealthService

    return HealthService(record_store=get_record_store(), tz=settings.tzinfo)


def get_graph_service() -> "GraphService":
    """
    Get a GraphService instance.

    GraphService is stateless and doesn't require store injection.
    """
    from vitals_tracker.services.graph import GraphService

    return GraphService(tz=settings.tzinfo)


def get_report_service() -> "ReportService":
    """
    Get a ReportService configured from settings.
    """
    from vitals_tracker.services.report import ReportService

    return ReportService(
        graph_service=get_graph_service(),
        tz=settings.tzinfo,
        title=settings.vitals_report_title,
        include_charts=settings.vitals_report_include_charts,
    )
