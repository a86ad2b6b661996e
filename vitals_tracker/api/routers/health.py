"""
Health and readiness endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the record store usable?)
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel

from vitals_tracker import __version__
from vitals_tracker.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__, timestamp=_utc_timestamp())


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

async def _check_record_store() -> DependencyStatus:
    """
    Check that the configured record store can be reached.

    The in-memory backend is always ready; SQLite runs a trivial query.
    """
    if settings.vitals_store_backend == "memory":
        return DependencyStatus(name="record_store", status="ok", latency_ms=0, message="In-memory store")

    from vitals_tracker.core.dependencies import get_database

    start = time.perf_counter()
    try:
        get_database().ping()
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="record_store",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Connection failed: {type(e).__name__}"
        )

    latency_ms = (time.perf_counter() - start) * 1000
    return DependencyStatus(
        name="record_store",
        status="ok",
        latency_ms=round(latency_ms, 2),
        message="SQLite connection healthy"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check if the record store is available. Returns 503 if not ready."
)
async def readiness_check(response: Response) -> ReadyResponse:
    store_status = await _check_record_store()

    if store_status.status == "unavailable":
        status = "not_ready"
        response.status_code = 503
    else:
        status = "ready"

    return ReadyResponse(status=status, dependencies=[store_status], timestamp=_utc_timestamp())


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@router.get(
    "/",
    summary="API root",
    description="Root endpoint with basic API information."
)
async def root() -> Dict[str, Any]:
    return {
        "service": "Vitals Tracker API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
    }
