"""
Reports router - PDF export.
"""
import logging

from fastapi import APIRouter, Depends, Response

from vitals_tracker.core.dependencies import get_health_service, get_report_service
from vitals_tracker.services import HealthService
from vitals_tracker.services.report import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["Reports"],
)


@router.get(
    "/pdf",
    summary="Download the PDF report",
    description="Landscape A4 report with trend charts, metric averages and every record, newest first.",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_pdf_report(
    health_service: HealthService = Depends(get_health_service),
    report_service: ReportService = Depends(get_report_service)
):
    """
    Raises:
    - 500 Internal Server Error: The document could not be built (ReportGenerationError)
    """
    now = health_service.now()
    records = health_service.list_records()
    pdf_content = report_service.generate_pdf(records, now=now)

    filename = f"health_report_{now.strftime('%Y%m%d')}.pdf"
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
