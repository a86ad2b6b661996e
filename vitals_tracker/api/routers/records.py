"""
Records router - health record CRUD, summary and chart endpoints.

Architecture:
    HTTP Request → Router (this file) → Services → RecordStore → Database

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.

Route order matters: /summary and /html-view are declared before
/{record_id} so they are not captured as record ids.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from vitals_tracker.analytics.date_filters import DateFilter, DateFilterType, filter_label
from vitals_tracker.core.datetime_utils import format_iso
from vitals_tracker.core.dependencies import get_graph_service, get_health_service
from vitals_tracker.schemas import (
    ClearRecordsResponse,
    HealthRecordCreate,
    HealthRecordResponse,
    MetricAverageResponse,
    SummaryResponse,
)
from vitals_tracker.services import HealthService
from vitals_tracker.services.graph import GraphService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/records",
    tags=["Health Records"],
)

ALL_RECORDS_LABEL = "All records"


def get_date_filter(
    filter_type: Optional[DateFilterType] = Query(
        None, alias="filter", description="Date filter: today, last7days, last30days or custom", examples=["last7days"]
    ),
    start_date: Optional[date] = Query(None, description="First day of a custom range", examples=["2025-01-01"]),
    end_date: Optional[date] = Query(None, description="Last day of a custom range", examples=["2025-01-31"]),
) -> Optional[DateFilter]:
    """
    Build a DateFilter from query parameters.

    start_date/end_date without an explicit filter imply ``custom``.
    Returns None when nothing was requested.
    """
    if filter_type is None:
        if start_date is None and end_date is None:
            return None
        filter_type = DateFilterType.CUSTOM

    if filter_type == DateFilterType.CUSTOM:
        return DateFilter.custom(start_date, end_date)
    return DateFilter(filter_type)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=HealthRecordResponse,
    status_code=201,
    summary="Log a health record",
    description="Store blood pressure, glycemia, heart rate and/or a note. At least one must be given."
)
async def create_record(
    record: HealthRecordCreate,
    health_service: HealthService = Depends(get_health_service)
):
    """
    Create a new health record.

    Raises:
    - 400 Bad Request: No measurement and no note (InvalidRecordDataError)
    - 500 Internal Server Error: Store failure (DatabaseError)
    """
    created = health_service.add_record(
        timestamp=record.timestamp,
        systolic=record.systolic,
        diastolic=record.diastolic,
        glycemia=record.glycemia,
        heart_rate=record.heart_rate,
        note=record.note,
    )
    return HealthRecordResponse.from_record(created)


@router.get(
    "",
    response_model=List[HealthRecordResponse],
    summary="List health records",
    description="Records newest first, optionally narrowed by a date filter. "
                "The active filter's label is returned in the X-Date-Filter header."
)
async def list_records(
    response: Response,
    date_filter: Optional[DateFilter] = Depends(get_date_filter),
    health_service: HealthService = Depends(get_health_service)
):
    records = health_service.list_records(date_filter)
    label = filter_label(date_filter) if date_filter else ALL_RECORDS_LABEL
    # Header values must be latin-1; the custom label uses an en dash.
    response.headers["X-Date-Filter"] = label.replace("–", "-")
    return [HealthRecordResponse.from_record(record) for record in records]


@router.delete(
    "",
    response_model=ClearRecordsResponse,
    summary="Delete every health record",
)
async def clear_records(
    health_service: HealthService = Depends(get_health_service)
):
    return ClearRecordsResponse(deleted=health_service.clear_records())


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Average of each metric",
    description="All-time and last-7-days averages. Null means no measurements in that period."
)
async def get_summary(
    health_service: HealthService = Depends(get_health_service)
):
    now = health_service.now()
    records = health_service.list_records()
    averages = health_service.summary(records, now)
    return SummaryResponse(
        generated_at=format_iso(now),
        record_count=len(records),
        metrics=[
            MetricAverageResponse(
                metric=item.metric.canonical_name,
                label=item.metric.label,
                unit=item.metric.unit,
                all_time_average=item.all_time,
                last_7_days_average=item.last_7_days,
            )
            for item in averages
        ],
    )


@router.get(
    "/html-view",
    summary="Interactive chart of health records",
    description="Plotly page with glycemia, blood pressure and heart rate panels; abnormal points in red."
)
async def get_html_view(
    date_filter: Optional[DateFilter] = Depends(get_date_filter),
    health_service: HealthService = Depends(get_health_service),
    graph_service: GraphService = Depends(get_graph_service)
):
    records = health_service.list_records(date_filter)
    subtitle = (filter_label(date_filter) if date_filter else "") or ALL_RECORDS_LABEL
    html_content = graph_service.generate_html_graph(records, subtitle)
    return Response(content=html_content, media_type="text/html")


@router.delete(
    "/{record_id}",
    status_code=204,
    summary="Delete a health record",
)
async def delete_record(
    record_id: str,
    health_service: HealthService = Depends(get_health_service)
):
    """
    Raises:
    - 404 Not Found: Unknown record id (RecordNotFoundError)
    """
    health_service.delete_record(record_id)
    return Response(status_code=204)
