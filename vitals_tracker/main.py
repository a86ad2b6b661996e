"""
FastAPI application entry point for the Vitals Tracker API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request ids
- Dependency Injection: Services and stores injected via Depends()
- Exception Handling: Consistent error responses via setup_exception_handlers()
- CORS Middleware: Allows a browser front end on another origin
- Lifespan Management: Logging and store initialization

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & request id    │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready                      │
    │    ├── records.py    - Records, summary, chart              │
    │    └── reports.py    - PDF export                           │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── HealthService      - Record lifecycle                │
    │    ├── GraphService       - Plotly charts                   │
    │    └── ReportService      - reportlab PDF                   │
    ├─────────────────────────────────────────────────────────────┤
    │  Analytics (analytics/)   ← Pure functions                  │
    │    └── date filters, averages, abnormality classifier       │
    ├─────────────────────────────────────────────────────────────┤
    │  RecordStore (repositories/)  ← Injected into HealthService │
    │    ├── HealthRecordRepository   - SQLite                    │
    │    └── InMemoryRecordStore      - process memory            │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from vitals_tracker import __version__
from vitals_tracker.api.routers import health_router, records_router, reports_router
from vitals_tracker.core.config import API_HOST, API_PORT, API_RELOAD, settings
from vitals_tracker.core.dependencies import get_record_store
from vitals_tracker.core.exceptions import setup_exception_handlers
from vitals_tracker.core.logging_config import setup_logging
from vitals_tracker.core.middleware import LoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, then open the record store so schema
    problems surface before the first request.
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Vitals Tracker API...")

    settings.ensure_directories()
    get_record_store()
    logger.info(
        "Record store initialized",
        extra={
            "backend": settings.vitals_store_backend,
            "db_path": settings.database_path,
            "timezone": settings.vitals_timezone,
        }
    )

    yield

    logger.info("Vitals Tracker API shutting down...")


app = FastAPI(
    title="Vitals Tracker API",
    description="Log blood pressure, glycemia and heart rate; view date-filtered trends, "
                "averages and abnormal readings; export a PDF report.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Executed in REVERSE order of registration: last registered handles the request first.

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Date-Filter", "Content-Disposition"],
)

app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(records_router)
app.include_router(reports_router)


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "vitals_tracker.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )


if __name__ == "__main__":
    run()
