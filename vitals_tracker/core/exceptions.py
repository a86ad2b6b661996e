"""
Shared exception classes and error handling utilities.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error response formatting
- Exception handlers for FastAPI integration

Usage:
    from vitals_tracker.core.exceptions import RecordNotFoundError

    # In service layer - raise domain exceptions
    raise RecordNotFoundError(record_id="3f2a...")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class VitalsServiceError(Exception):
    """
    Base exception for all Vitals Tracker domain errors.

    Carries an HTTP status code, a human-readable detail message and
    optional context that ends up in the JSON error body.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# RECORD EXCEPTIONS
# =============================================================================

class RecordNotFoundError(VitalsServiceError):
    """Raised when a health record is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Health record not found"

    def __init__(self, record_id: Optional[str] = None, **kwargs: Any):
        detail = f"Health record '{record_id}' not found" if record_id else self.detail
        super().__init__(detail=detail, record_id=record_id, **kwargs)


class InvalidRecordDataError(VitalsServiceError):
    """Raised when record data fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid record data"


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class DatabaseError(VitalsServiceError):
    """Raised when a record store operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# REPORT EXCEPTIONS
# =============================================================================

class ReportGenerationError(VitalsServiceError):
    """Raised when the PDF report cannot be built."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Report generation failed"


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def vitals_service_exception_handler(
    request: Request,
    exc: VitalsServiceError
) -> JSONResponse:
    """Log a domain error and return it as a JSON response."""
    logger.warning(
        f"VitalsServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(VitalsServiceError, vitals_service_exception_handler)
